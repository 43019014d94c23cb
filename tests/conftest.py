"""Shared pytest fixtures for the workspace backend tests."""
import os
import tempfile
from pathlib import Path

import pytest

# Point the application at a throwaway database before any app module loads.
_tmp_dir = Path(tempfile.mkdtemp(prefix="workspace_test_"))
TEST_DB_PATH = _tmp_dir / "test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["RATE_LIMIT"] = "10000/minute"
os.environ.setdefault("JWT_SECRET", "test-secret")

from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.database.engine import create_tables, make_engine, make_sessionmaker  # noqa: E402
from app.features.auth.services import register_user  # noqa: E402
from app.features.permissions.registry import RoleName  # noqa: E402
from app.features.permissions.seed import seed_roles  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


async def _session(roles: list[RoleName] | None):
    engine = make_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    session_factory = make_sessionmaker(engine)
    async with session_factory() as session:
        await seed_roles(session, roles)
        yield session
    await engine.dispose()


@pytest.fixture
async def db():
    """Session on a fresh in-memory database with every role seeded."""
    async for session in _session(None):
        yield session


@pytest.fixture
async def db_without_owner_role():
    """Session on a database whose seed data lacks the OWNER role."""
    async for session in _session([RoleName.ADMIN, RoleName.MEMBER]):
        yield session


@pytest.fixture
async def db_without_member_role():
    async for session in _session([RoleName.OWNER, RoleName.ADMIN]):
        yield session


@pytest.fixture
def register(db):
    """Register a local user and return the Registration."""
    async def _register(email: str, name: str | None = None, password: str = "secret"):
        return await register_user(db, email, name or email.split("@")[0], password)
    return _register


@pytest.fixture
def client():
    """HTTP client against the real app on an empty database file."""
    from fastapi.testclient import TestClient
    from app.main import app

    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
    # Startup creates the tables and seeds the roles
    with TestClient(app) as test_client:
        yield test_client
