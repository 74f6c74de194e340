import os

# Settings are read at import time; point them at SQLite before the app loads
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ADMIN_EMAIL", "")

import uuid  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest_asyncio  # noqa: E402
from fastapi_users.jwt import generate_jwt  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.auth import get_jwt_strategy  # noqa: E402
from core.permissions import ROLE_ADMIN, ROLE_EMPLOYEE, Actor  # noqa: E402
from db.database import get_async_session  # noqa: E402
from db.models import Base, User  # noqa: E402
from schemas.categories import CategoryCreate  # noqa: E402
from schemas.products import ProductCreate  # noqa: E402
from services import categories as category_service  # noqa: E402
from services import products as product_service  # noqa: E402

ADMIN = Actor(user_id=uuid.uuid4(), role=ROLE_ADMIN)


def employee(*category_ids) -> Actor:
    return Actor(user_id=uuid.uuid4(), role=ROLE_EMPLOYEE, allowed_category_ids=frozenset(category_ids))


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def file_session_maker(tmp_path):
    """Sessions on a file database, each with its own connection."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(eng, expire_on_commit=False)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


async def make_category(db, name: str = "Beverages"):
    created = await category_service.create_category(db, CategoryCreate(name=name, size="M", packaging="Box"))
    return created.category


async def make_product(db, category, name: str = "Water", **overrides):
    data = {
        "name": name,
        "unit_price": Decimal("100.00"),
        "unit_of_measure": "unit",
        "quantity_in_stock": 10,
        "min_stock_quantity": 5,
        "max_stock_quantity": 50,
        "category_id": category.id,
    }
    data.update(overrides)
    return await product_service.create_product(db, ADMIN, ProductCreate(**data))


@pytest_asyncio.fixture
async def client(session_maker):
    from main import app

    async def _session_override():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def token_for(user: User) -> dict:
    strategy = get_jwt_strategy()
    token = generate_jwt(
        {"sub": str(user.id), "aud": strategy.token_audience},
        strategy.encode_key,
        strategy.lifetime_seconds,
        algorithm=strategy.algorithm,
    )
    return {"Authorization": f"Bearer {token}"}
