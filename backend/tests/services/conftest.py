"""Service test fixtures — async DB, seeded users and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - db_manager patched so readiness probes see the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the pending-invitation
      partial index is declared for sqlite too, so uniqueness is exercised here
    - Seed helpers capture ids as plain UUIDs: a rolled-back unit of work expires
      ORM instances, and ids must stay readable after an expected failure
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from teambuilder.db.base import Base
from teambuilder.infrastructure.database import get_db, DatabaseSessionManager
import teambuilder.infrastructure.database as db_module
import teambuilder.models  # noqa: F401
from teambuilder.main import app
from teambuilder.services.invitation_workflow import InvitationWorkflow
from teambuilder.services.team_aggregate import TeamAggregate
from teambuilder.services.user_directory import UserDirectory


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
async def client(test_engine, test_session_factory):
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

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Domain seeds ────────────────────────────────────────────────

@pytest.fixture
def users(test_db):
    return UserDirectory(test_db)


@pytest.fixture
def teams(test_db):
    return TeamAggregate(test_db)


@pytest.fixture
def workflow(test_db):
    return InvitationWorkflow(test_db)


@pytest.fixture
def make_user(users):
    """Factory: register a user and return its id."""
    counter = {"n": 0}

    async def _make(name: str | None = None, is_admin: bool = False):
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        user = await users.create(f"{name}@example.com", name, is_admin=is_admin)
        return user.id

    return _make


@pytest.fixture
def make_team(teams):
    """Factory: create a team organized by the given user and return its id."""

    async def _make(organizer_id, is_open: bool = True, name: str = "Robotics Club"):
        result = await teams.create(name, "", is_open, organizer_id)
        assert result.success, result.message
        return result.value.id

    return _make


@pytest.fixture
async def alice(make_user):
    return await make_user("alice")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob")


@pytest.fixture
async def carol(make_user):
    return await make_user("carol")
