"""
Domain entities for the portfolio bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
Entities are immutable: the ledger returns new instances instead of
mutating the ones it was given.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Position:
    """One held stock line: symbol, share count and average cost basis."""

    symbol: str
    quantity: int
    average_cost: Decimal

    @property
    def cost_basis(self) -> Decimal:
        """Total amount paid for the currently held shares."""
        return self.average_cost * self.quantity


@dataclass(frozen=True)
class Profile:
    """Public profile details a user may edit.

    Attributes:
        name: Display name, trimmed.
        username: Lowercase handle, unique across accounts when set.
        bio: Free-text description, trimmed.
    """

    name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None


@dataclass(frozen=True)
class Account:
    """A user's virtual trading account.

    Attributes:
        user_id: Identity resolved by the upstream gateway.
        balance: Uncommitted cash. Never negative.
        positions: Held positions in insertion order, unique by symbol.
        watchlist: Tracked symbols in insertion order, unique.
        version: Optimistic concurrency token, bumped on every write.
        created_at: When the account was opened.
        profile: Editable public profile.
    """

    user_id: str
    balance: Decimal
    positions: tuple[Position, ...] = ()
    watchlist: tuple[str, ...] = ()
    version: int = 0
    created_at: Optional[datetime] = None
    profile: Profile = field(default_factory=Profile)

    def find_position(self, symbol: str) -> Optional[Position]:
        """Return the position for an already-normalized symbol, or None."""
        for position in self.positions:
            if position.symbol == symbol:
                return position
        return None
