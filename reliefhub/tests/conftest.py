"""Shared test fixtures: in-memory database, fake clock and API client"""

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "INFO"
os.environ.pop("AUTH_PROVIDER_URL", None)
os.environ.pop("AUTH_PROVIDER_API_KEY", None)
os.environ.pop("CAPTCHA_EXPIRE_MINUTES", None)

from reliefhub.app.api.deps import get_captcha_service, get_captcha_store
from reliefhub.app.core.database import get_session
from reliefhub.app.main import app
from reliefhub.app.models.captcha_session import CaptchaSession
from reliefhub.app.services.captcha_service import CaptchaService
from reliefhub.app.services.captcha_store import CaptchaSessionStore

TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeClock:
    """Naive-UTC clock that only moves when told to"""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 10, 18, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def load_session(session_factory):
    """Read a stored captcha row in its own short-lived session"""
    async def _load(session_id: str) -> CaptchaSession | None:
        async with session_factory() as session:
            return await session.get(CaptchaSession, session_id)
    return _load


@pytest.fixture
async def client(session_factory, clock: FakeClock) -> AsyncGenerator[AsyncClient, None]:
    """Test client wired to the test database and the fake clock"""
    async def override_get_session():
        async with session_factory() as session:
            yield session
            await session.commit()

    async def override_get_captcha_service(
        store: CaptchaSessionStore = Depends(get_captcha_store),
    ) -> CaptchaService:
        return CaptchaService(store, clock=clock)

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_captcha_service] = override_get_captcha_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
