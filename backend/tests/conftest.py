from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["LOG_LEVEL"] = "WARNING"

from db.database import Base, get_async_session  # noqa: E402
from db.sock import Sock  # noqa: E402
from main import app  # noqa: E402


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture()
async def seed_socks(session_maker):
    """Insert (color, cotton_percentage, amount) rows through a separate session."""
    async def _seed(*rows):
        async with session_maker() as session:
            socks = [Sock(color=c, cotton_percentage=p, amount=a) for c, p, a in rows]
            session.add_all(socks)
            await session.commit()
            return [s.id for s in socks]

    return _seed


@pytest_asyncio.fixture()
async def client(session_maker):
    async def _override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _override_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
