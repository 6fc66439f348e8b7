"""
Read-apply-write loop shared by every mutating portfolio use case.

Loads the account, applies a pure domain transition, and writes the
result back with a version check. A stale write is retried from a
fresh read up to ``max_attempts`` times.
"""

import logging
from typing import Callable

from app.application.portfolio.dtos import PortfolioResult, PositionResult
from app.domain.portfolio.entities import Account
from app.domain.portfolio.errors import (
    AccountNotFoundError,
    ConcurrentUpdateError,
    StaleAccountError,
)
from app.domain.portfolio.ports import AccountRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class AccountUpdater:
    """Applies domain transitions to an account under compare-and-swap."""

    def __init__(
        self,
        account_repo: AccountRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._account_repo = account_repo
        self._max_attempts = max_attempts

    def load(self, user_id: str) -> Account:
        """Return the account for a user.

        Raises:
            AccountNotFoundError: If the user has no account.
        """
        account = self._account_repo.get(user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        return account

    def apply(self, user_id: str, transition: Callable[[Account], Account]) -> Account:
        """Apply ``transition`` to the user's account and persist the result.

        Domain errors raised by the transition propagate untouched and
        nothing is written.

        Args:
            user_id: Owner of the account.
            transition: Pure function from the current to the new state.

        Returns:
            The stored account.

        Raises:
            AccountNotFoundError: If the user has no account.
            ConcurrentUpdateError: If every attempt hit a stale version.
        """
        for attempt in range(1, self._max_attempts + 1):
            current = self.load(user_id)
            updated = transition(current)
            if updated == current:
                return current
            try:
                return self._account_repo.save(updated, expected_version=current.version)
            except StaleAccountError:
                logger.warning(
                    "Stale write for user=%s at version=%d (attempt %d/%d)",
                    user_id,
                    current.version,
                    attempt,
                    self._max_attempts,
                )
        raise ConcurrentUpdateError(user_id, self._max_attempts)


def to_portfolio_result(account: Account) -> PortfolioResult:
    """Map an account onto the portfolio read DTO."""
    return PortfolioResult(
        portfolio=[
            PositionResult(
                symbol=p.symbol,
                quantity=p.quantity,
                average_cost=p.average_cost,
            )
            for p in account.positions
        ],
        balance=account.balance,
    )
