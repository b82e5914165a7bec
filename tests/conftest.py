"""Shared pytest fixtures for Localing Feed tests.

Fixture summary
---------------
settings        — Settings with test table names, isolated from any .env file.
fake_executor   — In-memory pagination executor with scripted pages.
app             — FastAPI app built around ``settings`` and ``fake_executor``.
client          — httpx.AsyncClient against ``app``.

No DynamoDB, PostgreSQL or network access is needed: stores are replaced by
``FakeExecutor`` or by ``unittest.mock`` doubles inside individual tests.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Settings() must not pick up a developer's real region or endpoint.
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-northeast-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from localing_feed.api.main import create_app  # noqa: E402
from localing_feed.config.settings import Settings, get_settings  # noqa: E402
from tests.factories.store import FakeExecutor  # noqa: E402

get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at ``localing-test-*`` tables."""
    return Settings(_env_file=None, environment="test", log_level="WARNING")


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """An executor that returns empty pages until a test scripts others."""
    return FakeExecutor()


@pytest.fixture
def app(settings: Settings, fake_executor: FakeExecutor) -> FastAPI:
    """The FastAPI app wired to ``fake_executor``."""
    return create_app(settings=settings, executor=fake_executor)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx.AsyncClient for the test app.

    Yields:
        :class:`httpx.AsyncClient` with base URL ``http://test``.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
