"""
Database engine factory.

Builds the SQLAlchemy engine for the account store from a URL.
In-memory SQLite URLs share one connection so every session sees
the same database.
"""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create an engine for the given database URL.

    Args:
        database_url: SQLAlchemy URL, e.g. ``postgresql://...`` or ``sqlite:///./data.db``.

    Returns:
        A configured SQLAlchemy engine.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
    else:
        engine = create_engine(url, pool_pre_ping=True)

    logger.info("Account store engine created for backend=%s", url.get_backend_name())
    return engine


def ping(engine: Engine) -> bool:
    """Return True if the account store answers a trivial query."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Account store ping failed: %s", exc)
        return False
    return True
