"""Service test fixtures — async DB, transaction manager, seed data, API client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - PRAGMA foreign_keys=ON on every connection, so deletion order matters
      exactly as it does on PostgreSQL
    - get_db / get_db_manager overridden so routes hit the test database
    - Seed: users 1 (Ada), 2 (Grace), 3 (Linus); technologies 10, 11, 12

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for the
      relational choreography under test
    - count_rows opens its own session per call so assertions never read a
      stale identity map
"""

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import create_async_engine
from httpx import ASGITransport, AsyncClient

from codify.db.base import Base
import codify.models  # noqa: F401
from codify.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from codify.models.technology import Technology
from codify.models.user import User
from codify.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def manager(test_engine):
    return DatabaseSessionManager(engine=test_engine)


@pytest.fixture
async def seed(manager):
    """Three users and three catalog technologies."""
    async with manager.transaction() as db:
        db.add_all([
            User(id=1, email="ada@example.com", name="Ada", password="hash-1"),
            User(id=2, email="grace@example.com", name="Grace", password="hash-2"),
            User(id=3, email="linus@example.com", name="Linus", password="hash-3"),
        ])
        db.add_all([
            Technology(id=10, name="Python"),
            Technology(id=11, name="SQL"),
            Technology(id=12, name="Rust"),
        ])
    return {"users": [1, 2, 3], "technologies": [10, 11, 12]}


@pytest.fixture
def count_rows(manager):
    """Async callable: count rows of a model matching optional criteria."""
    async def _count(model, *criteria) -> int:
        query = select(func.count()).select_from(model)
        if criteria:
            query = query.where(*criteria)
        async with manager.session() as db:
            result = await db.execute(query)
            return result.scalar_one()
    return _count


@pytest.fixture
async def client(manager):
    """FastAPI test client with DB dependencies overridden."""
    async def override_get_db():
        async with manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_manager] = lambda: manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
