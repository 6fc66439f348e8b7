"""
Data Transfer Objects for the portfolio application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class OpenAccountCommand:
    """Input DTO for opening a new account.

    Attributes:
        user_id: Identity resolved by the upstream gateway.
    """

    user_id: str


@dataclass(frozen=True)
class GetPortfolioQuery:
    """Input DTO for reading an account's holdings and cash."""

    user_id: str


@dataclass(frozen=True)
class TradeCommand:
    """Input DTO for a buy or sell order.

    Attributes:
        user_id: Identity resolved by the upstream gateway.
        symbol: Ticker symbol, any case.
        quantity: Whole number of shares.
        price: Price per share.
    """

    user_id: str
    symbol: str
    quantity: int
    price: Decimal


@dataclass(frozen=True)
class DepositFundsCommand:
    """Input DTO for a cash top-up.

    Attributes:
        user_id: Identity resolved by the upstream gateway.
        amount: Cash to credit.
    """

    user_id: str
    amount: Decimal


@dataclass(frozen=True)
class GetWatchlistQuery:
    """Input DTO for reading a watchlist."""

    user_id: str


@dataclass(frozen=True)
class WatchlistCommand:
    """Input DTO for adding or removing a watchlist symbol."""

    user_id: str
    symbol: str


@dataclass(frozen=True)
class PositionResult:
    """Output DTO for one held position.

    Attributes:
        symbol: Canonical uppercase ticker.
        quantity: Shares held.
        average_cost: Volume-weighted average purchase price.
    """

    symbol: str
    quantity: int
    average_cost: Decimal


@dataclass(frozen=True)
class PortfolioResult:
    """Output DTO for an account's holdings and cash."""

    portfolio: list[PositionResult]
    balance: Decimal


@dataclass(frozen=True)
class BalanceResult:
    """Output DTO for a cash balance."""

    balance: Decimal


@dataclass(frozen=True)
class WatchlistResult:
    """Output DTO for a watchlist."""

    watchlist: list[str]


@dataclass(frozen=True)
class GetProfileQuery:
    """Input DTO for reading a profile."""

    user_id: str


@dataclass(frozen=True)
class UpdateProfileCommand:
    """Input DTO for a partial profile edit.

    Attributes:
        user_id: Identity resolved by the upstream gateway.
        name: New display name, or None to keep the current one.
        username: New handle, or None to keep the current one.
        bio: New description, or None to keep the current one.
    """

    user_id: str
    name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None


@dataclass(frozen=True)
class ProfileResult:
    """Output DTO for a user's profile."""

    user_id: str
    name: Optional[str]
    username: Optional[str]
    bio: Optional[str]
    created_at: Optional[datetime]
