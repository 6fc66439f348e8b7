"""
Pydantic schemas for portfolio API request/response validation.

These schemas enforce type-level validation and define the API contract.
Money fields are bounded in digits here. Positivity, share limits and
symbol normalization are ledger rules and are checked in the domain
layer, which reports them as 400 responses.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

SYMBOL_DESCRIPTION = "Ticker symbol, matched case-insensitively"
SYMBOL_MAX_LEN = 32
MONEY_MAX_DIGITS = 40
MONEY_DECIMAL_PLACES = 8
NAME_MAX_LEN = 100
USERNAME_MAX_LEN = 64
BIO_MAX_LEN = 500


class TradeRequest(BaseModel):
    """Request schema for buy and sell orders.

    Attributes:
        symbol: Ticker symbol (any case, surrounding spaces ignored).
        quantity: Whole number of shares.
        price: Price per share.
    """

    symbol: str = Field(..., max_length=SYMBOL_MAX_LEN, description=SYMBOL_DESCRIPTION)
    quantity: int = Field(..., description="Number of shares, must be positive")
    price: Decimal = Field(
        ...,
        allow_inf_nan=False,
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        description="Price per share, must be positive",
    )


class DepositRequest(BaseModel):
    """Request schema for cash top-ups."""

    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        description="Cash to credit, must be positive",
    )


class WatchlistRequest(BaseModel):
    """Request schema for adding a watchlist symbol."""

    symbol: str = Field(..., max_length=SYMBOL_MAX_LEN, description=SYMBOL_DESCRIPTION)


class PositionItem(BaseModel):
    """A single held position in the response."""

    symbol: str
    quantity: int
    average_cost: Decimal


class PortfolioResponse(BaseModel):
    """Response schema for portfolio reads and orders."""

    portfolio: list[PositionItem]
    balance: Decimal


class BalanceResponse(BaseModel):
    """Response schema for the deposit endpoint."""

    balance: Decimal


class WatchlistResponse(BaseModel):
    """Response schema for watchlist endpoints."""

    watchlist: list[str]


class UpdateProfileRequest(BaseModel):
    """Request schema for a partial profile edit. Omitted fields are kept.

    Attributes:
        name: Display name, trimmed.
        username: 3-20 letters, digits, underscores or hyphens. Stored lowercase.
        bio: Free-text description, trimmed.
    """

    name: str | None = Field(None, max_length=NAME_MAX_LEN)
    username: str | None = Field(None, max_length=USERNAME_MAX_LEN)
    bio: str | None = Field(None, max_length=BIO_MAX_LEN)


class ProfileResponse(BaseModel):
    """Response schema for profile endpoints."""

    user_id: str
    name: str | None
    username: str | None
    bio: str | None
    created_at: datetime | None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    database: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: str | None = None
