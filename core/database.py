"""
Async database access for the coaching back-office.

One lazily-created SQLAlchemy Core engine (asyncpg) per process, with
`get_connection` for reads and `get_transaction` for writes. Alembic uses
the psycopg2 flavour of the same DATABASE_URL.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .tables import metadata  # noqa: F401 - exported for Alembic

_engine: AsyncEngine | None = None

_SCHEMES = ("postgres://", "postgresql://", "postgresql+asyncpg://", "postgresql+psycopg2://")


def _with_driver(database_url: str, driver: str | None) -> str:
    """Rewrite any postgres URL scheme to `postgresql[+driver]://`."""
    for scheme in _SCHEMES:
        if database_url.startswith(scheme):
            rest = database_url[len(scheme):]
            prefix = f"postgresql+{driver}://" if driver else "postgresql://"
            return prefix + rest
    raise ValueError(f"Unsupported DATABASE_URL scheme: {database_url.split('://')[0]}")


def _require_url() -> str:
    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable must be set.")
    return database_url


def get_engine() -> AsyncEngine:
    """Get or create the engine. Pool size is tunable via DB_POOL_SIZE."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            _with_driver(_require_url(), "asyncpg"),
            echo=os.environ.get("SQL_ECHO", "").lower() == "true",
            pool_size=int(os.environ.get("DB_POOL_SIZE", "5")),
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
    return _engine


@asynccontextmanager
async def get_connection() -> AsyncGenerator[AsyncConnection, None]:
    """
    Connection for read paths; nothing is committed.

    Usage:
        async with get_connection() as conn:
            rows = await list_form_responses(conn, client_id)
    """
    async with get_engine().connect() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncGenerator[AsyncConnection, None]:
    """
    Connection inside a transaction: commits when the block exits cleanly,
    rolls back if it raises.

    Usage:
        async with get_transaction() as conn:
            await upsert_form_response(conn, client_id, form_type, responses)
    """
    async with get_engine().begin() as conn:
        yield conn


async def close_engine() -> None:
    """Dispose the engine (FastAPI shutdown, end of a test)."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


def is_configured() -> bool:
    return bool(os.environ.get("DATABASE_URL"))


def get_sync_database_url() -> str:
    """DATABASE_URL with the default psycopg2 driver, for Alembic."""
    try:
        return _with_driver(_require_url(), None)
    except ValueError:
        raise ValueError("DATABASE_URL must be set to a postgres URL for migrations")
