"""Database engine and session management"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from reliefhub.app.core.config import settings

_POOL_SIZE = 5
_MAX_OVERFLOW = 15
_POOL_RECYCLE_SECONDS = 300
_POOL_TIMEOUT_SECONDS = 10       # wait at most 10s for a free pooled connection
_CONNECT_TIMEOUT_SECONDS = 10    # asyncpg TCP connect timeout
_COMMAND_TIMEOUT_SECONDS = 30    # asyncpg per-statement timeout


def _engine_options(database_url: str) -> dict[str, Any]:
    """Pool and driver options; sqlite (local/test) keeps the dialect defaults."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": _POOL_SIZE,
        "max_overflow": _MAX_OVERFLOW,
        "pool_recycle": _POOL_RECYCLE_SECONDS,
        "pool_pre_ping": True,
        "pool_timeout": _POOL_TIMEOUT_SECONDS,
        "connect_args": {
            "timeout": _CONNECT_TIMEOUT_SECONDS,
            "command_timeout": _COMMAND_TIMEOUT_SECONDS,
        },
    }


engine = create_async_engine(
    settings.database_url,
    echo=settings.log_level == "DEBUG",
    **_engine_options(settings.database_url),
)

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency: yields a database session"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
