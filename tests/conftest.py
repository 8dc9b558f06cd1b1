"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models use only portable column
types, so the real metadata is created directly -- no test mirrors.
A fresh engine per test keeps every test isolated.
"""

import os

# Cheap hashes; must be set before src.config is imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.infrastructure import models  # noqa: F401  (registers tables)
from src.infrastructure.database import Base
from src.infrastructure.models import BarberModel, UserModel
from src.infrastructure.security import hash_password


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "s3cret-pass"


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables on a private in-memory DB, then dispose it."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by the per-test SQLite database."""
    from src.api.app import create_app
    from src.api.dependencies import get_db
    from src.api.middleware import limiter

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ── Helpers ───────────────────────────────────────────────────────────


async def make_user(session: AsyncSession, name: str = "Test User", **kwargs) -> UserModel:
    kwargs.setdefault("email", f"{name.lower().replace(' ', '.')}@example.com")
    user = UserModel(name=name, password_hash=hash_password(TEST_PASSWORD), **kwargs)
    session.add(user)
    await session.flush()
    return user


async def make_barber(
    session: AsyncSession,
    name: str = "Test Barber",
    lat: float = 0.0,
    long: float = 0.0,
    username: str | None = None,
) -> BarberModel:
    barber = BarberModel(
        name=name,
        username=username or name.lower().replace(" ", ""),
        password_hash=hash_password(TEST_PASSWORD),
        lat=lat,
        long=long,
    )
    session.add(barber)
    await session.flush()
    return barber


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
