# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Route tests run against the real app with `require_admin` overridden and
the database context managers patched, so no database is needed.
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

# Ensure we import from root main.py
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from main import app
from web_api.auth import require_admin

ADMIN_USER = {"user_id": 1, "email": "coach@example.com", "is_admin": True}


@pytest.fixture
def admin_client():
    """TestClient whose requests are authenticated as an admin."""
    app.dependency_overrides[require_admin] = lambda: ADMIN_USER
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(require_admin, None)


@pytest.fixture
def anon_client():
    return TestClient(app)


@pytest.fixture
def mock_db():
    """
    Patch get_connection/get_transaction in every route module.

    Yields the connection object handed to query functions.
    """
    conn = AsyncMock()

    @asynccontextmanager
    async def fake_connection():
        yield conn

    targets = [
        f"web_api.routes.{module}.{name}"
        for module in ("coaching", "courses", "members")
        for name in ("get_connection", "get_transaction")
    ]
    patchers = [patch(target, fake_connection) for target in targets]
    for p in patchers:
        p.start()
    try:
        yield conn
    finally:
        for p in patchers:
            p.stop()
