"""User-related database queries using SQLAlchemy Core."""

from typing import Any

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import users


async def get_user_by_id(
    conn: AsyncConnection,
    user_id: int,
) -> dict[str, Any] | None:
    """Get a user by primary key."""
    result = await conn.execute(select(users).where(users.c.user_id == user_id))
    row = result.mappings().first()
    return dict(row) if row else None


async def is_admin(conn: AsyncConnection, user_id: int) -> bool:
    """Check if user has admin access."""
    result = await conn.execute(
        select(users.c.is_admin).where(users.c.user_id == user_id)
    )
    row = result.first()
    return row is not None and row.is_admin is True


async def create_user(
    conn: AsyncConnection,
    email: str,
    **fields: Any,
) -> dict[str, Any]:
    """Create a new user and return the created record."""
    result = await conn.execute(
        insert(users).values(email=email, **fields).returning(users)
    )
    row = result.mappings().first()
    return dict(row)
