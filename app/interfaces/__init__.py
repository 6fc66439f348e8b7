"""
Interfaces layer package.

Contains FastAPI routers, Pydantic request/response schemas,
caller-identity resolution and dependency wiring.
Routes call use cases and return responses.
"""
