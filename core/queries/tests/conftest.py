"""Fixtures for query tests against a real database.

Every test runs inside a transaction that is rolled back afterwards, so
rows created by `make_member` never outlive the test.
"""

import itertools

import pytest
import pytest_asyncio

from core.database import close_engine, get_engine
from core.queries.users import create_user


@pytest_asyncio.fixture
async def db_conn():
    engine = get_engine()
    async with engine.connect() as conn:
        txn = await conn.begin()
        try:
            yield conn
        finally:
            await txn.rollback()

    await close_engine()


@pytest.fixture
def make_member(db_conn):
    """Factory creating users with unique emails; returns the user row."""
    counter = itertools.count(1)

    async def _make(label: str = "member", **fields):
        email = f"{label}-{next(counter)}@test.example.com"
        return await create_user(db_conn, email, **fields)

    return _make
