"""
Portfolio application layer.

Use cases orchestrating the portfolio ledger against the account
repository. Each use case is a single class with an ``execute`` method.
"""
