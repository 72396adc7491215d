"""Service test fixtures — async DB, seeded cards, credentials + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe hits the test engine
    - Credential store loaded with cheap bcrypt rounds
    - unmigrated_client skips the get_db override to exercise store-failure mapping

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Seeded cards mirror the demo ledger: 99/100/101 for sarah1, 102 for kumar2
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from cashcard.db.base import Base
from cashcard.infrastructure.credential_store import init_credentials
from cashcard.infrastructure.database import get_db, DatabaseSessionManager
from cashcard.models.cash_card import CashCardModel
import cashcard.infrastructure.credential_store as credential_module
import cashcard.infrastructure.database as db_module
from cashcard.main import app
from tests.services.ledger_fixtures import SEEDED_CARDS, TEST_ACCOUNTS


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
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
async def seed_cards(test_session_factory):
    """Insert the demo ledger with fixed ids."""
    async with test_session_factory() as session:
        session.add_all([
            CashCardModel(id=card.id, amount=card.amount, owner=card.owner)
            for card in SEEDED_CARDS
        ])
        await session.commit()


@pytest.fixture
async def client(test_engine, test_session_factory, seed_cards):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    original_store = credential_module.credential_store
    init_credentials(TEST_ACCOUNTS, rounds=4)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    credential_module.credential_store = original_store


@pytest.fixture
async def unmigrated_client():
    """Client wired through the real get_db against a store with no tables."""
    original_manager = db_module.db_manager
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    db_module.db_manager = manager

    original_store = credential_module.credential_store
    init_credentials(TEST_ACCOUNTS, rounds=4)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    await manager.dispose()
    db_module.db_manager = original_manager
    credential_module.credential_store = original_store
