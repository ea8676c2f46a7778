"""
Shared fixtures: a throw-away SQLite user store and an ASGI test client.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auth.jwt import TokenIssuer, get_token_issuer
from database.session import build_engine, get_db_session, init_db
from main import create_app

TEST_SECRET = "test-secret"
TEST_EXPIRY = 3600


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}")
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def issuer():
    return TokenIssuer(secret=TEST_SECRET, expiry_seconds=TEST_EXPIRY)


@pytest.fixture
def app(session_factory, issuer):
    application = create_app(create_tables=False)

    async def _test_session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    application.dependency_overrides[get_db_session] = _test_session
    application.dependency_overrides[get_token_issuer] = lambda: issuer
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

