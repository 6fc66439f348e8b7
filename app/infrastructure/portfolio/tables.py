"""
SQLAlchemy table definitions for the account store.

Money columns hold Decimal values as unbounded text so amounts round-trip
exactly on every backend, including SQLite. Share counts are 64-bit.
"""

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)
from sqlalchemy.engine import Engine

SYMBOL_LENGTH = 32
USERNAME_LENGTH = 20
USER_ID_LENGTH = 128

metadata = MetaData()

accounts = Table(
    "accounts",
    metadata,
    Column("user_id", String(USER_ID_LENGTH), primary_key=True),
    Column("balance", Text, nullable=False),
    Column("version", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True)),
    Column("name", Text),
    Column("username", String(USERNAME_LENGTH), unique=True),
    Column("bio", Text),
)

positions = Table(
    "positions",
    metadata,
    Column(
        "user_id",
        String(USER_ID_LENGTH),
        ForeignKey("accounts.user_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("symbol", String(SYMBOL_LENGTH), nullable=False),
    Column("quantity", BigInteger, nullable=False),
    Column("average_cost", Text, nullable=False),
    Column("seq", Integer, nullable=False),
    PrimaryKeyConstraint("user_id", "symbol", name="pk_positions"),
)

watchlist_items = Table(
    "watchlist_items",
    metadata,
    Column(
        "user_id",
        String(USER_ID_LENGTH),
        ForeignKey("accounts.user_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("symbol", String(SYMBOL_LENGTH), nullable=False),
    Column("seq", Integer, nullable=False),
    PrimaryKeyConstraint("user_id", "symbol", name="pk_watchlist_items"),
)


def create_schema(engine: Engine) -> None:
    """Create any missing account-store tables."""
    metadata.create_all(engine)
