"""
Port interfaces (ABCs) for the portfolio bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.portfolio.entities import Account


class AccountRepository(ABC):
    """Port for persisting and retrieving user accounts.

    Writes are compare-and-swap on the account version, so a read,
    ledger call and write-back sequence never overwrites a concurrent
    change for the same user.
    """

    @abstractmethod
    def get(self, user_id: str) -> Optional[Account]:
        """Return the account for a user, or None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    def create(self, account: Account) -> None:
        """Persist a brand-new account.

        Raises:
            AccountAlreadyExistsError: If the user already has an account.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, account: Account, expected_version: int) -> Account:
        """Write balance, profile, positions and watchlist in one transaction.

        Args:
            account: The new account state.
            expected_version: Version the caller read before computing it.

        Returns:
            The stored account with its version bumped.

        Raises:
            StaleAccountError: If the stored version no longer matches.
            UsernameTakenError: If another account holds the profile username.
        """
        raise NotImplementedError
