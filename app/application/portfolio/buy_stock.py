"""
Use case: Buy shares against the virtual cash balance.

Input: TradeCommand (user_id, symbol, quantity, price)
Output: PortfolioResult
Side effects: Debits the balance and updates the position.
Failure cases: AccountNotFoundError, ValidationError,
    InsufficientFundsError, ConcurrentUpdateError.
"""

import logging

from app.application.portfolio.account_updater import AccountUpdater, to_portfolio_result
from app.application.portfolio.dtos import PortfolioResult, TradeCommand
from app.domain.portfolio.ledger import PortfolioLedger

logger = logging.getLogger(__name__)


class BuyStockUseCase:
    """Orchestrates a buy order.

    Delegates the arithmetic and invariant checks to the PortfolioLedger
    and persistence to the AccountUpdater.
    """

    def __init__(self, updater: AccountUpdater, ledger: PortfolioLedger) -> None:
        self._updater = updater
        self._ledger = ledger

    def execute(self, command: TradeCommand) -> PortfolioResult:
        """Run the buy use case.

        Args:
            command: The order with symbol, quantity and price.

        Returns:
            The updated portfolio and balance.
        """
        account = self._updater.apply(
            command.user_id,
            lambda state: self._ledger.apply_buy(
                state, command.symbol, command.quantity, command.price
            ),
        )
        logger.info(
            "Bought %s x%s @ %s for user=%s",
            command.symbol,
            command.quantity,
            command.price,
            command.user_id,
        )
        return to_portfolio_result(account)
