"""
Portfolio bounded context: domain layer.

This module contains all domain logic for the portfolio context:
- Account and position entities
- The portfolio ledger (buy, sell, deposit)
- Symbol normalization
- Watchlist and profile edits
- Repository port for account persistence
"""
