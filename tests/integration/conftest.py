"""Integration-test fixtures (requires running PG + Redis, migrated to head).

Opt in with RUN_INTEGRATION=1; otherwise every test here is skipped.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.

Users are provisioned by the external auth service in production, so the
fixtures insert them directly and mint tokens with create_access_token.
"""

import os
import uuid
from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.main import app
from src.sq_common.database import async_session_factory
from src.sq_gateway.auth.jwt_handler import create_access_token

_RUN = os.environ.get("RUN_INTEGRATION") == "1"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if _RUN:
        return
    skip = pytest.mark.skip(reason="set RUN_INTEGRATION=1 with PG + Redis running")
    here = os.path.dirname(__file__)
    for item in items:
        if str(item.path).startswith(here):
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def make_user() -> Callable[..., Awaitable[dict[str, str]]]:
    """Insert a fresh user row and return its id plus an Authorization header."""

    async def _make(balance: str = "1000.00", is_admin: bool = False) -> dict[str, str]:
        user_id = f"usr_it_{uuid.uuid4().hex[:12]}"
        async with async_session_factory() as session:
            await session.execute(
                text(
                    "INSERT INTO users (id, username, virtual_balance, is_admin) "
                    "VALUES (:id, :username, :balance, :is_admin)"
                ),
                {"id": user_id, "username": user_id, "balance": balance, "is_admin": is_admin},
            )
            await session.commit()
        return {
            "user_id": user_id,
            "Authorization": f"Bearer {create_access_token(user_id)}",
        }

    return _make
