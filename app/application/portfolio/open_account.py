"""
Use case: Open a virtual trading account.

Input: OpenAccountCommand (user_id)
Output: PortfolioResult
Side effects: Persists a new account seeded with the starting balance.
Failure cases: AccountAlreadyExistsError.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from app.application.portfolio.account_updater import to_portfolio_result
from app.application.portfolio.dtos import OpenAccountCommand, PortfolioResult
from app.domain.portfolio.entities import Account
from app.domain.portfolio.ports import AccountRepository

logger = logging.getLogger(__name__)


class OpenAccountUseCase:
    """Creates an account with an empty portfolio and the seed balance."""

    def __init__(self, account_repo: AccountRepository, starting_balance: Decimal) -> None:
        self._account_repo = account_repo
        self._starting_balance = starting_balance

    def execute(self, command: OpenAccountCommand) -> PortfolioResult:
        """Run the open-account use case.

        Raises:
            AccountAlreadyExistsError: If the user already has an account.
        """
        account = Account(
            user_id=command.user_id,
            balance=self._starting_balance,
            created_at=datetime.now(timezone.utc),
        )
        self._account_repo.create(account)
        logger.info(
            "Opened account for user=%s with balance=%s",
            command.user_id,
            self._starting_balance,
        )
        return to_portfolio_result(account)
