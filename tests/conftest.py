"""Test fixtures — in-memory database, real RSA keys, mocked key authority.

Learn: Testing pattern for async SQLAlchemy + FastAPI + httpx:

1. Each test gets its own in-memory SQLite database (aiosqlite + StaticPool,
   so every session in the test sees the same connection).
2. The remote key authority is an httpx.MockTransport handler serving the
   PEM public key of a keypair generated once per test session. Tests flip
   `authority.down` or swap `authority.pem` to simulate outages and rotation.
3. The app's get_db and get_context are overridden so routes use the test
   session and the mocked KeyProvider. Auth is NOT overridden — requests
   carry real signatures made with the test private key.
"""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from seona.auth.crypto import CryptoVerifier
from seona.auth.identity import IdentityStore
from seona.auth.keys import KeyProvider
from seona.config import Settings
from seona.context import SiteContext, get_context
from seona.db.engine import get_db
from seona.db.models import Base
from seona.main import app
from seona.services.option_store import OptionStore

from signing import KeyAuthority, generate_keypair, public_pem, sign

TEST_DB_URL = "sqlite+aiosqlite://"
KEY_ENDPOINT = "https://keys.test/api/keys/wordpress"
SITE_URL = "https://blog.test"


# ─── Keys ────────────────────────────────────────────────


@pytest.fixture(scope="session")
def private_key():
    """The Seona platform's signing key."""
    return generate_keypair()


@pytest.fixture(scope="session")
def other_private_key():
    """A key nobody published — signatures made with it must fail."""
    return generate_keypair()


@pytest.fixture()
def authority(private_key):
    return KeyAuthority(public_pem(private_key))


@pytest.fixture()
def key_provider(authority):
    return KeyProvider(
        KEY_ENDPOINT, timeout=5.0, transport=httpx.MockTransport(authority)
    )


# ─── App wiring ──────────────────────────────────────────


@pytest.fixture()
def test_settings(tmp_path):
    return Settings(
        database_url=TEST_DB_URL,
        key_endpoint=KEY_ENDPOINT,
        site_url=SITE_URL,
        media_dir=str(tmp_path / "media"),
        auto_activate=False,
    )


@pytest.fixture()
def context(test_settings, key_provider):
    return SiteContext(
        settings=test_settings,
        keys=key_provider,
        verifier=CryptoVerifier(),
    )


@pytest_asyncio.fixture()
async def db_session():
    """Fresh in-memory database per test."""
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture()
def identity(db_session, test_settings):
    return IdentityStore(
        OptionStore(db_session), option_name=test_settings.identifier_option
    )


@pytest_asyncio.fixture()
async def identifier(identity):
    """Activate the site and return its identifier."""
    return await identity.ensure_identifier()


@pytest.fixture()
def signed(private_key, identifier):
    """Headers for a request correctly signed by the Seona platform."""
    return {"Signature": sign(private_key, identifier)}


@pytest_asyncio.fixture()
async def client(db_session, context):
    """HTTP client with the app's get_db and get_context overridden."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_context] = lambda: context

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
