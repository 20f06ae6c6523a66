"""Service test fixtures — async DB, stores, catalog and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager patched so the readiness probe and catalog see the test engine
    - The app's services are rebuilt per test: no game or subscriber leaks
      between tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - StaticPool: aiosqlite opens one connection per checkout, and an in-memory
      database lives only as long as its connection
    - Seeded catalog sits just above the default minimums (8 black, 34 white)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from cardczar.config import Settings
from cardczar.core.randomness import create_random_source
from cardczar.db.base import Base
from cardczar.infrastructure.database import DatabaseSessionManager
from cardczar.infrastructure.memory_store import InMemoryGameStateStore
from cardczar.infrastructure.notifier import StateBroadcaster
import cardczar.infrastructure.database as db_module
from cardczar.main import app, build_services
from cardczar.services.card_catalog import SqlCardCatalog
from cardczar.services.game_service import GameService
from cardczar.services.game_state_repository import SqlGameStateStore


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
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
def db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager wired to the test engine (no new pool)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def catalog(db_manager):
    return SqlCardCatalog(db_manager)


@pytest.fixture
async def seeded_catalog(catalog):
    """Catalog with one 'base' expansion: 10 black prompts, 60 white answers."""
    for i in range(10):
        await catalog.create_black(f"Prompt {i}: ____.", "base", 1)
    for i in range(60):
        await catalog.create_white(f"Answer {i}", "base")
    return catalog


@pytest.fixture
def memory_store():
    return InMemoryGameStateStore()


@pytest.fixture
def sql_store(db_manager):
    return SqlGameStateStore(db_manager)


@pytest.fixture
def notifier():
    return StateBroadcaster()


@pytest.fixture
def game_service(memory_store, seeded_catalog, notifier):
    return GameService(
        memory_store, seeded_catalog, notifier, create_random_source(42),
    )


@pytest.fixture
def test_settings():
    return Settings(
        store_backend="memory",
        rng_seed=42,
        min_black_cards=8,
        min_white_cards=34,
        scheduler_user_id="svc-scheduler",
    )


@pytest.fixture
async def client(db_manager, seeded_catalog, test_settings):
    """FastAPI test client with services built on the test database."""
    original_manager = db_module.db_manager
    db_module.db_manager = db_manager
    build_services(app, test_settings, db_manager)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager
