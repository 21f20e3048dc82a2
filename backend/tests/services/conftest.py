"""Service test fixtures — async DB, fake analytics, wired services and a test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Concurrency tests use a file-backed database with one connection per session
    - get_db and get_analytics_sink dependencies overridden for route tests
    - db_manager patched so the readiness probe sees the test engine
    - Analytics events recorded in memory (FakeAnalyticsSink.events)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; JSON arrays and the ref table keep
      every query portable, so nothing PostgreSQL-specific goes untested here
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_analytics_sink
from app.db.base import Base
from app.infrastructure.catalog_store import CatalogStore
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.entry_store import EntryStore
from app.infrastructure.field_cipher import PlaintextCipher
from app.infrastructure.user_store import UserStore
from app.models.user import User
from app.services.catalog_locks import CatalogLocks
from app.services.journal_entries import JournalEntryService
from app.services.settings_catalog import SettingsCatalogService
from app.services.usage_guard import UsageGuard
from app.services.users import UserService
import app.infrastructure.database as db_module
from app.main import app

ALICE = "auth0|alice"
BOB = "auth0|bob"


class FakeAnalyticsSink:
    """Records events instead of sending them."""

    def __init__(self):
        self.events: list[tuple[str, str, dict | None]] = []

    async def track(self, event_name, user_id, properties=None):
        self.events.append((event_name, user_id, properties))

    async def aclose(self):
        return None

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]


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
async def file_session_factory(tmp_path):
    """File-backed SQLite: every session gets its own connection, so requests truly interleave."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'journal.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def analytics():
    return FakeAnalyticsSink()


@pytest.fixture
async def alice(test_db):
    """Registered user without a Settings aggregate."""
    test_db.add(User(id=ALICE))
    await test_db.commit()
    return ALICE


@pytest.fixture
async def bob(test_db):
    test_db.add(User(id=BOB))
    await test_db.commit()
    return BOB


@pytest.fixture
async def alice_settings(test_db, alice):
    """Alice with an empty Settings aggregate."""
    await CatalogStore(test_db).create(alice)
    return alice


@pytest.fixture
def settings_service(test_db, analytics):
    return SettingsCatalogService(
        store=CatalogStore(test_db),
        usage=UsageGuard(EntryStore(test_db)),
        identity=UserStore(test_db),
        analytics=analytics,
        tag_types=["General Activity", "Soothing Activity"],
        activity_types=["Soothing"],
        default_tags=["Home 🏠", "Work 💻", "Hobbies 💃", "Self-Care 🥰"],
        default_tag_type="General Activity",
        locks=CatalogLocks(),
    )


@pytest.fixture
def entry_service(test_db, analytics):
    return JournalEntryService(
        entries=EntryStore(test_db),
        identity=UserStore(test_db),
        cipher=PlaintextCipher(),
        analytics=analytics,
        catalog=CatalogStore(test_db),
    )


@pytest.fixture
def user_service(test_db, analytics):
    return UserService(test_db, analytics, locks=CatalogLocks())


@pytest.fixture
async def client(test_engine, test_session_factory, analytics):
    """FastAPI test client with DB and analytics dependencies overridden."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    # Same auto-rollback + error mapping as production sessions
    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_analytics_sink] = lambda: analytics

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
