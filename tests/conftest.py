import os
import tempfile
from datetime import datetime, timezone

# Point the app at a throwaway SQLite database before any app module is imported
_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="ludicrum-tests-"), "test.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["DATABASE_URL_SYNC"] = f"sqlite:///{_DB_PATH}"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.core.clock import get_clock
from app.core.database import AsyncSessionLocal, async_engine, sync_engine
from app.main import app
from app.models import Base
from app.services.users import Identity, UserService
from tests.helpers import FakeClock

START = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest_asyncio.fixture
async def db_engine():
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield async_engine
    await async_engine.dispose()
    sync_engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine):
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def make_user(db_engine):
    async def _make_user(user_id: str, name: str | None = None):
        async with AsyncSessionLocal() as session:
            return await UserService(session).sync_identity(Identity(user_id=user_id, name=name))
    return _make_user


@pytest_asyncio.fixture
async def client(db_engine, clock):
    app.dependency_overrides[get_clock] = lambda: clock
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
