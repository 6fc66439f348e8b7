"""
Domain service: Watchlist maintenance.

Pure functions over an Account's watchlist. Both operations are
idempotent and return a new Account.
"""

from dataclasses import replace

from app.domain.portfolio.entities import Account
from app.domain.portfolio.symbols import normalize_symbol


def add_to_watchlist(state: Account, symbol: object) -> Account:
    """Append a symbol to the watchlist unless it is already tracked."""
    canonical = normalize_symbol(symbol)
    if canonical in state.watchlist:
        return state
    return replace(state, watchlist=state.watchlist + (canonical,))


def remove_from_watchlist(state: Account, symbol: object) -> Account:
    """Drop a symbol from the watchlist. Untracked symbols are ignored."""
    canonical = normalize_symbol(symbol)
    if canonical not in state.watchlist:
        return state
    return replace(state, watchlist=tuple(s for s in state.watchlist if s != canonical))
