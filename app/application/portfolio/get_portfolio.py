"""
Use case: Read an account's holdings and cash balance.

Input: GetPortfolioQuery (user_id)
Output: PortfolioResult
Side effects: None.
Failure cases: AccountNotFoundError.
"""

from app.application.portfolio.account_updater import AccountUpdater, to_portfolio_result
from app.application.portfolio.dtos import GetPortfolioQuery, PortfolioResult


class GetPortfolioUseCase:
    """Returns the current portfolio and balance for a user."""

    def __init__(self, updater: AccountUpdater) -> None:
        self._updater = updater

    def execute(self, query: GetPortfolioQuery) -> PortfolioResult:
        """Run the read-portfolio use case."""
        return to_portfolio_result(self._updater.load(query.user_id))
