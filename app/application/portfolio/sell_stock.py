"""
Use case: Sell held shares for virtual cash.

Input: TradeCommand (user_id, symbol, quantity, price)
Output: PortfolioResult
Side effects: Credits the balance and reduces or removes the position.
Failure cases: AccountNotFoundError, ValidationError, NoPositionError,
    InsufficientSharesError, ConcurrentUpdateError.
"""

import logging

from app.application.portfolio.account_updater import AccountUpdater, to_portfolio_result
from app.application.portfolio.dtos import PortfolioResult, TradeCommand
from app.domain.portfolio.ledger import PortfolioLedger

logger = logging.getLogger(__name__)


class SellStockUseCase:
    """Orchestrates a sell order."""

    def __init__(self, updater: AccountUpdater, ledger: PortfolioLedger) -> None:
        self._updater = updater
        self._ledger = ledger

    def execute(self, command: TradeCommand) -> PortfolioResult:
        """Run the sell use case."""
        account = self._updater.apply(
            command.user_id,
            lambda state: self._ledger.apply_sell(
                state, command.symbol, command.quantity, command.price
            ),
        )
        logger.info(
            "Sold %s x%s @ %s for user=%s",
            command.symbol,
            command.quantity,
            command.price,
            command.user_id,
        )
        return to_portfolio_result(account)
