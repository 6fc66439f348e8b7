"""
Adapter: Account repository.

Implements AccountRepository port.
Persists accounts, positions and watchlists through SQLAlchemy Core.
Writes are guarded by an optimistic version check on the account row.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from app.domain.portfolio.entities import Account, Position, Profile
from app.domain.portfolio.errors import (
    AccountAlreadyExistsError,
    StaleAccountError,
    UsernameTakenError,
)
from app.domain.portfolio.ports import AccountRepository
from app.infrastructure.portfolio.tables import accounts, positions, watchlist_items

logger = logging.getLogger(__name__)


def _profile_columns(account: Account) -> dict:
    return {
        "name": account.profile.name,
        "username": account.profile.username,
        "bio": account.profile.bio,
    }


class SqlAccountRepository(AccountRepository):
    """SQLAlchemy implementation of the account repository.

    Stores the account row in ``accounts`` and its child collections in
    ``positions`` and ``watchlist_items``, ordered by a ``seq`` column
    that preserves insertion order.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, user_id: str) -> Optional[Account]:
        """Return the account for a user, or None if not found.

        Args:
            user_id: Owner of the account.

        Returns:
            Account entity or None.
        """
        with self._engine.connect() as conn:
            row = conn.execute(
                select(accounts).where(accounts.c.user_id == user_id)
            ).mappings().first()
            if row is None:
                return None

            position_rows = conn.execute(
                select(positions)
                .where(positions.c.user_id == user_id)
                .order_by(positions.c.seq)
            ).mappings().all()
            watchlist_rows = conn.execute(
                select(watchlist_items.c.symbol)
                .where(watchlist_items.c.user_id == user_id)
                .order_by(watchlist_items.c.seq)
            ).all()

        return Account(
            user_id=row["user_id"],
            balance=Decimal(row["balance"]),
            positions=tuple(
                Position(
                    symbol=p["symbol"],
                    quantity=p["quantity"],
                    average_cost=Decimal(p["average_cost"]),
                )
                for p in position_rows
            ),
            watchlist=tuple(w.symbol for w in watchlist_rows),
            version=row["version"],
            created_at=row["created_at"],
            profile=Profile(
                name=row["name"], username=row["username"], bio=row["bio"]
            ),
        )

    def create(self, account: Account) -> None:
        """Persist a new account.

        Args:
            account: Account entity to insert.

        Raises:
            AccountAlreadyExistsError: If the user already has an account.
        """
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    insert(accounts).values(
                        user_id=account.user_id,
                        balance=str(account.balance),
                        version=account.version,
                        created_at=account.created_at,
                        **_profile_columns(account),
                    )
                )
                self._write_children(conn, account)
        except IntegrityError as exc:
            raise AccountAlreadyExistsError(account.user_id) from exc

        logger.debug("Created account for user=%s.", account.user_id)

    def save(self, account: Account, expected_version: int) -> Account:
        """Persist a new account state if nobody wrote since ``expected_version``.

        The version check and all child rows commit in one transaction;
        a stale write rolls back without touching anything.

        Args:
            account: New account state.
            expected_version: Version read before computing the new state.

        Returns:
            The account with its version bumped.

        Raises:
            StaleAccountError: If the stored version differs.
            UsernameTakenError: If another account holds the profile username.
        """
        new_version = expected_version + 1
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    update(accounts)
                    .where(accounts.c.user_id == account.user_id)
                    .where(accounts.c.version == expected_version)
                    .values(
                        balance=str(account.balance),
                        version=new_version,
                        **_profile_columns(account),
                    )
                )
                if result.rowcount != 1:
                    raise StaleAccountError(account.user_id, expected_version)

                conn.execute(delete(positions).where(positions.c.user_id == account.user_id))
                conn.execute(
                    delete(watchlist_items).where(watchlist_items.c.user_id == account.user_id)
                )
                self._write_children(conn, account)
        except IntegrityError as exc:
            # only the username column is unique outside the primary keys
            raise UsernameTakenError(account.profile.username or "") from exc

        logger.debug("Saved account for user=%s at version=%d.", account.user_id, new_version)
        return replace(account, version=new_version)

    @staticmethod
    def _write_children(conn: Connection, account: Account) -> None:
        """Insert position and watchlist rows for an account."""
        if account.positions:
            conn.execute(
                insert(positions),
                [
                    {
                        "user_id": account.user_id,
                        "symbol": p.symbol,
                        "quantity": p.quantity,
                        "average_cost": str(p.average_cost),
                        "seq": seq,
                    }
                    for seq, p in enumerate(account.positions)
                ],
            )
        if account.watchlist:
            conn.execute(
                insert(watchlist_items),
                [
                    {"user_id": account.user_id, "symbol": symbol, "seq": seq}
                    for seq, symbol in enumerate(account.watchlist)
                ],
            )
