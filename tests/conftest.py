import os

# Settings are read once at import time, so the test environment goes first
os.environ["API_SECRET_TOKEN"] = "test-static-token"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["OPENAI_API_KEY"] = "sk-test"
os.environ["LOG_FILE"] = ""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from main import app
from app.ai.ai_service import AIService
from app.core.config import settings
from app.core.database import get_db, build_engine, build_session_factory, init_db
from app.core.deps import get_ai_service

# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_completion(content):
    """Minimal stand-in for an OpenAI chat completion response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
async def engine():
    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion(""))
    return client


@pytest.fixture
def ai_service(openai_client) -> AIService:
    service = AIService()
    service.client = openai_client
    service._get_redis = AsyncMock(return_value=None)
    return service


@pytest.fixture
async def client(session_factory, ai_service) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: ai_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_token() -> str:
    # Static service token; JWT login is covered by the auth tests
    return settings.API_SECRET_TOKEN


@pytest.fixture
def auth_headers(auth_token: str) -> dict:
    return {"Authorization": f"Bearer {auth_token}"}
