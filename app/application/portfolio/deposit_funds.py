"""
Use case: Top up the virtual cash balance.

Input: DepositFundsCommand (user_id, amount)
Output: BalanceResult
Side effects: Credits the balance.
Failure cases: AccountNotFoundError, ValidationError, ConcurrentUpdateError.
"""

import logging

from app.application.portfolio.account_updater import AccountUpdater
from app.application.portfolio.dtos import BalanceResult, DepositFundsCommand
from app.domain.portfolio.ledger import PortfolioLedger

logger = logging.getLogger(__name__)


class DepositFundsUseCase:
    """Orchestrates a cash deposit."""

    def __init__(self, updater: AccountUpdater, ledger: PortfolioLedger) -> None:
        self._updater = updater
        self._ledger = ledger

    def execute(self, command: DepositFundsCommand) -> BalanceResult:
        """Run the deposit use case."""
        account = self._updater.apply(
            command.user_id,
            lambda state: self._ledger.apply_deposit(state, command.amount),
        )
        logger.info("Deposited %s for user=%s", command.amount, command.user_id)
        return BalanceResult(balance=account.balance)
