"""
Use cases: Read and edit a user's watchlist.

Input: GetWatchlistQuery / WatchlistCommand
Output: WatchlistResult
Side effects: Add and remove persist the edited watchlist.
Failure cases: AccountNotFoundError, ValidationError, ConcurrentUpdateError.
"""

from app.application.portfolio.account_updater import AccountUpdater
from app.application.portfolio.dtos import (
    GetWatchlistQuery,
    WatchlistCommand,
    WatchlistResult,
)
from app.domain.portfolio.watchlist import add_to_watchlist, remove_from_watchlist


class GetWatchlistUseCase:
    """Returns the symbols a user tracks."""

    def __init__(self, updater: AccountUpdater) -> None:
        self._updater = updater

    def execute(self, query: GetWatchlistQuery) -> WatchlistResult:
        account = self._updater.load(query.user_id)
        return WatchlistResult(watchlist=list(account.watchlist))


class AddToWatchlistUseCase:
    """Adds a symbol to the watchlist. Adding a tracked symbol is a no-op."""

    def __init__(self, updater: AccountUpdater) -> None:
        self._updater = updater

    def execute(self, command: WatchlistCommand) -> WatchlistResult:
        account = self._updater.apply(
            command.user_id,
            lambda state: add_to_watchlist(state, command.symbol),
        )
        return WatchlistResult(watchlist=list(account.watchlist))


class RemoveFromWatchlistUseCase:
    """Removes a symbol from the watchlist. Removing an untracked symbol is a no-op."""

    def __init__(self, updater: AccountUpdater) -> None:
        self._updater = updater

    def execute(self, command: WatchlistCommand) -> WatchlistResult:
        account = self._updater.apply(
            command.user_id,
            lambda state: remove_from_watchlist(state, command.symbol),
        )
        return WatchlistResult(watchlist=list(account.watchlist))
