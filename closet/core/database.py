"""
Async engine, session factory and the per-request session dependency
PostgreSQL through asyncpg in deployment; aiosqlite works for local runs and tests
Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from closet.core.config import settings


if not settings.DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Please set it in your .env file."
    )


def _connect_args(database_url: str) -> dict:
    """Driver-specific connection arguments"""
    if database_url.startswith("postgresql+asyncpg://"):
        # Reference: https://magicstack.github.io/asyncpg/current/api/index.html#connection
        return {
            "command_timeout": 60,
            "server_settings": {"application_name": "closet_api"},
        }
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# NullPool: one fresh connection per request, nothing kept across invocations
# Reference: https://docs.sqlalchemy.org/en/20/core/pooling.html#switching-pool-implementations
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    poolclass=NullPool,
    connect_args=_connect_args(settings.DATABASE_URL),
)


# expire_on_commit=False keeps timestamps readable after the request commits
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base shared by users, clothes, events and outfit_suggestions"""
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    One session per request.

    Services only flush; the request commits here once the handler returned
    and rolls everything back if it raised.
    Reference: https://fastapi.tiangolo.com/tutorial/dependencies/dependencies-with-yield/
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
