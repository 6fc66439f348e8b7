"""
Infrastructure adapters for the portfolio bounded context.

Each adapter implements a domain port (ABC) and connects
to external systems, here the relational account store.
"""
