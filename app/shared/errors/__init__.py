"""
Shared error handling package.

Translates portfolio domain errors into JSON error responses with
consistent status codes.
"""
