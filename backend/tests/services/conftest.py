"""Service test fixtures — async SQLite Ledger Store, fixed clock, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and get_clock dependencies overridden for route tests
    - The clock is frozen on Wednesday 23-Jul-2025 (ISO week Monday 21-Jul-2025)
    - Ledger locks cleared per test (each test runs on its own event loop)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for the key/value table
    - InMemoryLedgerStore for concurrency tests: one AsyncSession cannot serve
      concurrent coroutines, a dict can
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from loyaltypool.api.dependencies import get_clock
from loyaltypool.config import Settings
from loyaltypool.db.base import Base
from loyaltypool.infrastructure.database import get_db, DatabaseSessionManager
from loyaltypool.infrastructure.ledger_store import SqlLedgerStore
import loyaltypool.infrastructure.database as db_module
import loyaltypool.models  # noqa: F401
from loyaltypool.main import app
from loyaltypool.services import discount_engine as engine_module
from loyaltypool.services.discount_engine import DiscountPoolingEngine
from loyaltypool.services.token_authority import TokenAuthority

from tests.services.ledger_fixtures import FROZEN_NOW, FixedClock


@pytest.fixture(autouse=True)
def _reset_ledger_locks():
    engine_module._ledger_locks.clear()
    yield
    engine_module._ledger_locks.clear()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return SqlLedgerStore(test_db)


@pytest.fixture
def clock():
    return FixedClock(FROZEN_NOW)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def authority(store, clock, settings):
    return TokenAuthority(store, clock, settings)


@pytest.fixture
def engine(store, clock, settings, authority):
    return DiscountPoolingEngine(store, clock, settings, authority)


@pytest.fixture
async def client(test_engine, test_session_factory, clock):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    # Readiness probe reads db_manager directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager

