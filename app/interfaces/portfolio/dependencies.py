"""
Dependency injection for the portfolio bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the portfolio context.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, Request
from sqlalchemy.engine import Engine

from app.application.portfolio.account_updater import AccountUpdater
from app.application.portfolio.buy_stock import BuyStockUseCase
from app.application.portfolio.deposit_funds import DepositFundsUseCase
from app.application.portfolio.get_portfolio import GetPortfolioUseCase
from app.application.portfolio.manage_profile import GetProfileUseCase, UpdateProfileUseCase
from app.application.portfolio.manage_watchlist import (
    AddToWatchlistUseCase,
    GetWatchlistUseCase,
    RemoveFromWatchlistUseCase,
)
from app.application.portfolio.open_account import OpenAccountUseCase
from app.application.portfolio.sell_stock import SellStockUseCase
from app.core.config import settings
from app.domain.portfolio.ledger import PortfolioLedger
from app.domain.portfolio.ports import AccountRepository
from app.infrastructure.portfolio.account_repository import SqlAccountRepository
from app.infrastructure.portfolio.database import build_engine
from app.infrastructure.portfolio.tables import create_schema

HTTP_401 = 401


@lru_cache(maxsize=1)
def get_db_engine() -> Engine:
    """Build the account-store engine once and make sure its tables exist."""
    engine = build_engine(settings.database_url)
    create_schema(engine)
    return engine


def get_current_user_id(request: Request) -> str:
    """Return the caller identity resolved by the upstream gateway.

    Raises:
        HTTPException: 401 if the identity header is missing or blank.
    """
    user_id = request.headers.get(settings.user_id_header, "").strip()
    if not user_id:
        raise HTTPException(status_code=HTTP_401, detail="Missing user identity")
    return user_id


def get_account_repository(
    engine: Engine = Depends(get_db_engine),
) -> AccountRepository:
    """Build the SQL account repository."""
    return SqlAccountRepository(engine=engine)


def get_account_updater(
    account_repo: AccountRepository = Depends(get_account_repository),
) -> AccountUpdater:
    """Build the compare-and-swap updater with the configured retry budget."""
    return AccountUpdater(
        account_repo=account_repo,
        max_attempts=settings.ledger_max_retries,
    )


def get_ledger() -> PortfolioLedger:
    """Build the portfolio ledger domain service."""
    return PortfolioLedger()


def get_open_account_use_case(
    account_repo: AccountRepository = Depends(get_account_repository),
) -> OpenAccountUseCase:
    """Build OpenAccountUseCase with its infrastructure dependencies."""
    return OpenAccountUseCase(
        account_repo=account_repo,
        starting_balance=settings.starting_balance,
    )


def get_portfolio_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
) -> GetPortfolioUseCase:
    """Build GetPortfolioUseCase with its infrastructure dependencies."""
    return GetPortfolioUseCase(updater=updater)


def get_buy_stock_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
    ledger: PortfolioLedger = Depends(get_ledger),
) -> BuyStockUseCase:
    """Build BuyStockUseCase with its infrastructure dependencies."""
    return BuyStockUseCase(updater=updater, ledger=ledger)


def get_sell_stock_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
    ledger: PortfolioLedger = Depends(get_ledger),
) -> SellStockUseCase:
    """Build SellStockUseCase with its infrastructure dependencies."""
    return SellStockUseCase(updater=updater, ledger=ledger)


def get_deposit_funds_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
    ledger: PortfolioLedger = Depends(get_ledger),
) -> DepositFundsUseCase:
    """Build DepositFundsUseCase with its infrastructure dependencies."""
    return DepositFundsUseCase(updater=updater, ledger=ledger)


def get_watchlist_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
) -> GetWatchlistUseCase:
    """Build GetWatchlistUseCase with its infrastructure dependencies."""
    return GetWatchlistUseCase(updater=updater)


def get_add_to_watchlist_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
) -> AddToWatchlistUseCase:
    """Build AddToWatchlistUseCase with its infrastructure dependencies."""
    return AddToWatchlistUseCase(updater=updater)


def get_remove_from_watchlist_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
) -> RemoveFromWatchlistUseCase:
    """Build RemoveFromWatchlistUseCase with its infrastructure dependencies."""
    return RemoveFromWatchlistUseCase(updater=updater)


def get_profile_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
) -> GetProfileUseCase:
    """Build GetProfileUseCase with its infrastructure dependencies."""
    return GetProfileUseCase(updater=updater)


def get_update_profile_use_case(
    updater: AccountUpdater = Depends(get_account_updater),
) -> UpdateProfileUseCase:
    """Build UpdateProfileUseCase with its infrastructure dependencies."""
    return UpdateProfileUseCase(updater=updater)
