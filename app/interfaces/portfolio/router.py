"""
FastAPI router for the portfolio bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas and the domain ledger.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends

from app.application.portfolio.buy_stock import BuyStockUseCase
from app.application.portfolio.deposit_funds import DepositFundsUseCase
from app.application.portfolio.dtos import (
    DepositFundsCommand,
    GetPortfolioQuery,
    GetProfileQuery,
    GetWatchlistQuery,
    OpenAccountCommand,
    PortfolioResult,
    ProfileResult,
    TradeCommand,
    UpdateProfileCommand,
    WatchlistCommand,
)
from app.application.portfolio.get_portfolio import GetPortfolioUseCase
from app.application.portfolio.manage_profile import GetProfileUseCase, UpdateProfileUseCase
from app.application.portfolio.manage_watchlist import (
    AddToWatchlistUseCase,
    GetWatchlistUseCase,
    RemoveFromWatchlistUseCase,
)
from app.application.portfolio.open_account import OpenAccountUseCase
from app.application.portfolio.sell_stock import SellStockUseCase
from app.interfaces.portfolio.dependencies import (
    get_add_to_watchlist_use_case,
    get_buy_stock_use_case,
    get_current_user_id,
    get_deposit_funds_use_case,
    get_open_account_use_case,
    get_portfolio_use_case,
    get_profile_use_case,
    get_remove_from_watchlist_use_case,
    get_sell_stock_use_case,
    get_update_profile_use_case,
    get_watchlist_use_case,
)
from app.interfaces.portfolio.schemas import (
    BalanceResponse,
    DepositRequest,
    ErrorResponse,
    PortfolioResponse,
    PositionItem,
    ProfileResponse,
    TradeRequest,
    UpdateProfileRequest,
    WatchlistRequest,
    WatchlistResponse,
)

router = APIRouter(tags=["portfolio"])


def _portfolio_response(result: PortfolioResult) -> PortfolioResponse:
    return PortfolioResponse(
        portfolio=[
            PositionItem(
                symbol=p.symbol,
                quantity=p.quantity,
                average_cost=p.average_cost,
            )
            for p in result.portfolio
        ],
        balance=result.balance,
    )


def _profile_response(result: ProfileResult) -> ProfileResponse:
    return ProfileResponse(
        user_id=result.user_id,
        name=result.name,
        username=result.username,
        bio=result.bio,
        created_at=result.created_at,
    )


@router.post(
    "/accounts",
    status_code=201,
    response_model=PortfolioResponse,
    responses={409: {"model": ErrorResponse}},
    summary="Open an account",
    description="Open a virtual trading account seeded with the starting balance.",
)
def open_account(
    user_id: str = Depends(get_current_user_id),
    use_case: OpenAccountUseCase = Depends(get_open_account_use_case),
) -> PortfolioResponse:
    """Open an account for the calling user."""
    result = use_case.execute(OpenAccountCommand(user_id=user_id))
    return _portfolio_response(result)


@router.get(
    "/portfolio",
    response_model=PortfolioResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get portfolio",
    description="Return held positions and the cash balance.",
)
def get_portfolio(
    user_id: str = Depends(get_current_user_id),
    use_case: GetPortfolioUseCase = Depends(get_portfolio_use_case),
) -> PortfolioResponse:
    """Return the calling user's portfolio."""
    result = use_case.execute(GetPortfolioQuery(user_id=user_id))
    return _portfolio_response(result)


@router.post(
    "/portfolio/buy",
    response_model=PortfolioResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Buy stock",
    description="Buy shares, debiting quantity * price from the balance.",
)
def buy_stock(
    request: TradeRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: BuyStockUseCase = Depends(get_buy_stock_use_case),
) -> PortfolioResponse:
    """Apply a buy order to the calling user's account."""
    command = TradeCommand(
        user_id=user_id,
        symbol=request.symbol,
        quantity=request.quantity,
        price=request.price,
    )
    return _portfolio_response(use_case.execute(command))


@router.post(
    "/portfolio/sell",
    response_model=PortfolioResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Sell stock",
    description="Sell held shares, crediting quantity * price to the balance.",
)
def sell_stock(
    request: TradeRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: SellStockUseCase = Depends(get_sell_stock_use_case),
) -> PortfolioResponse:
    """Apply a sell order to the calling user's account."""
    command = TradeCommand(
        user_id=user_id,
        symbol=request.symbol,
        quantity=request.quantity,
        price=request.price,
    )
    return _portfolio_response(use_case.execute(command))


@router.post(
    "/portfolio/deposit",
    response_model=BalanceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Deposit funds",
    description="Top up the virtual cash balance.",
)
def deposit_funds(
    request: DepositRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: DepositFundsUseCase = Depends(get_deposit_funds_use_case),
) -> BalanceResponse:
    """Credit cash to the calling user's balance."""
    result = use_case.execute(DepositFundsCommand(user_id=user_id, amount=request.amount))
    return BalanceResponse(balance=result.balance)


@router.get(
    "/watchlist",
    response_model=WatchlistResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get watchlist",
)
def get_watchlist(
    user_id: str = Depends(get_current_user_id),
    use_case: GetWatchlistUseCase = Depends(get_watchlist_use_case),
) -> WatchlistResponse:
    result = use_case.execute(GetWatchlistQuery(user_id=user_id))
    return WatchlistResponse(watchlist=result.watchlist)


@router.post(
    "/watchlist",
    response_model=WatchlistResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Add to watchlist",
)
def add_to_watchlist(
    request: WatchlistRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: AddToWatchlistUseCase = Depends(get_add_to_watchlist_use_case),
) -> WatchlistResponse:
    result = use_case.execute(WatchlistCommand(user_id=user_id, symbol=request.symbol))
    return WatchlistResponse(watchlist=result.watchlist)


@router.delete(
    "/watchlist/{symbol}",
    response_model=WatchlistResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Remove from watchlist",
)
def remove_from_watchlist(
    symbol: str,
    user_id: str = Depends(get_current_user_id),
    use_case: RemoveFromWatchlistUseCase = Depends(get_remove_from_watchlist_use_case),
) -> WatchlistResponse:
    result = use_case.execute(WatchlistCommand(user_id=user_id, symbol=symbol))
    return WatchlistResponse(watchlist=result.watchlist)


@router.get(
    "/me",
    response_model=ProfileResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get profile",
)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
) -> ProfileResponse:
    return _profile_response(use_case.execute(GetProfileQuery(user_id=user_id)))


@router.patch(
    "/me",
    response_model=ProfileResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update profile",
    description="Edit name, username and bio. Omitted fields keep their value.",
)
def update_profile(
    request: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
) -> ProfileResponse:
    """Apply a partial profile edit for the calling user."""
    command = UpdateProfileCommand(
        user_id=user_id,
        name=request.name,
        username=request.username,
        bio=request.bio,
    )
    return _profile_response(use_case.execute(command))
