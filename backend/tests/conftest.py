"""Pytest configuration and fixtures."""
import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from linkshort.api.deps import limiter
from linkshort.config import settings
from linkshort.core.policy import Tier
from linkshort.core.security import create_access_token, get_password_hash
from linkshort.database import create_engine, create_session_factory, create_tables
from linkshort.main import create_app
from linkshort.models import User

TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """No outbound title fetches and a fresh rate-limit window per test."""
    monkeypatch.setattr(settings, "FETCH_PAGE_TITLE", False)
    limiter.reset()


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow; hash once per session
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def engine(tmp_path):
    """Async engine on a throwaway SQLite file."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'linkshort-test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def app(engine):
    return create_app(engine)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def make_user(session_factory, password_hash):
    """Factory creating a user directly in the store; returns (user, auth headers)."""

    async def _make_user(tier: Tier = Tier.FREE, is_admin: bool = False, email: str = None):
        async with session_factory() as db:
            user = User(
                email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
                password_hash=password_hash,
                tier=tier.value,
                is_admin=is_admin,
            )
            db.add(user)
            await db.commit()
            await db.refresh(user)

        token = create_access_token(data={"sub": user.id})
        return user, {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
async def free_user(make_user):
    return await make_user(Tier.FREE)


@pytest.fixture
async def pro_user(make_user):
    return await make_user(Tier.PRO)


@pytest.fixture
async def premium_user(make_user):
    return await make_user(Tier.PREMIUM)
