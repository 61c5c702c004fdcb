import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("WORKOS_API_KEY", "sk_test_closet")
os.environ.setdefault("WORKOS_CLIENT_ID", "client_test_closet")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from closet.models import Base, ClothingItem, User  # noqa: E402


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def user(db) -> User:
    user = User(id="user_01", email="alice@example.com", full_name="Alice Martin")
    db.add(user)
    await db.flush()
    return user


@pytest.fixture
async def other_user(db) -> User:
    user = User(id="user_02", email="bob@example.com")
    db.add(user)
    await db.flush()
    return user


_item_ids = count(1)


def make_item(item_type: str, user_id: str = "user_01", tags=None, **fields) -> ClothingItem:
    """Transient clothing item with every column a response needs"""
    now = datetime(2026, 3, 14, 9, 0, tzinfo=timezone.utc)
    number = next(_item_ids)
    return ClothingItem(
        id=fields.pop("id", f"{item_type}-{number}"),
        user_id=user_id,
        image_url=f"https://clothes-images.s3.eu-west-3.amazonaws.com/{user_id}/{number}.jpg",
        type=item_type,
        tags=tags,
        created_at=fields.pop("created_at", now),
        updated_at=now,
        **fields,
    )


@pytest.fixture
def item_factory():
    return make_item
