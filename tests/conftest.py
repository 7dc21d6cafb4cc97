"""
Shared test fixtures for the Presensi test suite.

Every test gets a fresh in-memory SQLite database (aiosqlite) and an
httpx AsyncClient wired to the app with ``get_db`` overridden.
"""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production-use-0123456789abcdef"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from presensi.api.deps import get_db
from presensi.api.handlers.auth import limiter
from presensi.core.security import create_access_token, get_password_hash
from presensi.db.base import Base
from presensi.main import app
from presensi.models import Employee, User

DEFAULT_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def _reset_login_limiter():
    """Login throttling is process-wide; start every test with a clean slate."""
    limiter.reset()
    yield


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database with all tables, wired into the app."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory
    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


UserFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def user_factory(db_session: AsyncSession) -> UserFactory:
    """Create a committed user (plus employee record)."""

    async def _make(
        email: str,
        *,
        name: str | None = None,
        role: str = "employee",
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> User:
        user = User(
            name=name or email.split("@")[0].title(),
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.flush()
        db_session.add(Employee(user_id=user.id))
        await db_session.commit()
        return user

    return _make


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
async def admin_user(user_factory) -> User:
    return await user_factory("admin@example.com", name="Admin", role="admin")


@pytest.fixture
async def employee_user(user_factory) -> User:
    return await user_factory("budi@example.com", name="Budi Santoso")


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def employee_headers(employee_user: User) -> dict[str, str]:
    return bearer(employee_user)


@pytest.fixture
def auth_for() -> Callable[[User], dict[str, str]]:
    """Build an Authorization header for any user."""
    return bearer
