"""
Shared test fixtures.

Repository, issuer and HTTP scenario tests run against an in-memory SQLite
database built from the model metadata. Service unit tests use mock_db and
patch the module repository instead.
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from classhub.core import rate_limit
from classhub.core.config import get_settings
from classhub.core.database import get_db
from classhub.core.security import hash_password
from classhub.models import Base
from classhub.modules.auth.tokens import SessionTokenIssuer
from classhub.modules.users.models import User, UserRole

TEST_PASSWORD = "Password@123"


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Rate limit counters are process-wide; start every test from zero."""
    rate_limit._memory_store.clear()
    rate_limit._memory_expiry.clear()
    yield
    rate_limit._memory_store.clear()
    rate_limit._memory_expiry.clear()


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def settings():
    return get_settings()


@pytest_asyncio.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory bound to a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, with get_db bound to the test database."""
    from classhub.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_maker):
    """Factory inserting a verified user whose password is TEST_PASSWORD."""

    async def _make_user(
        *,
        email: str,
        role: UserRole = UserRole.STUDENT,
        full_name: str = "Test User",
        is_active: bool = True,
        user_id: int | None = None,
        phone_number: str | None = None,
    ) -> User:
        async with session_maker() as db:
            user = User(
                email=email,
                password_hash=hash_password(TEST_PASSWORD),
                full_name=full_name,
                phone_number=phone_number,
                role=role,
                is_active=is_active,
                is_verified=True,
            )
            if user_id is not None:
                user.id = user_id
            db.add(user)
            await db.commit()
            return user

    return _make_user


@pytest.fixture
def auth_headers():
    """Build a bearer header carrying a fresh access token for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = SessionTokenIssuer(get_settings()).issue_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest_asyncio.fixture
async def admin_user(make_user) -> User:
    return await make_user(email="admin@example.com", role=UserRole.ADMIN, full_name="Admin User")


@pytest_asyncio.fixture
async def student_user(make_user) -> User:
    return await make_user(email="student@example.com", full_name="Student One")


@pytest.fixture
def admin_headers(admin_user, auth_headers) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def student_headers(student_user, auth_headers) -> dict[str, str]:
    return auth_headers(student_user)
