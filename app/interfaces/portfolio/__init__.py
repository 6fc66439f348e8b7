"""
HTTP interface for the portfolio bounded context.
"""
