"""Key authority client tests."""

import httpx
import pytest

from seona.auth.keys import KeyProvider
from seona.errors import UpstreamUnavailable

from signing import KeyAuthority

KEY_ENDPOINT = "https://keys.test/api/keys/wordpress"


def _provider(handler, **kwargs) -> KeyProvider:
    return KeyProvider(KEY_ENDPOINT, transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_fetch_returns_pem_body(authority):
    keys = _provider(authority)
    assert await keys.fetch_public_key() == authority.pem.strip()


@pytest.mark.asyncio
async def test_fetch_hits_configured_endpoint():
    seen = []

    def handler(request):
        seen.append((request.method, str(request.url)))
        return httpx.Response(200, content=b"-----BEGIN PUBLIC KEY-----\n...")

    await _provider(handler).fetch_public_key()
    assert seen == [("GET", KEY_ENDPOINT)]


@pytest.mark.asyncio
async def test_fetch_non_success_status_fails(authority):
    authority.status = 502
    with pytest.raises(UpstreamUnavailable):
        await _provider(authority).fetch_public_key()


@pytest.mark.asyncio
async def test_fetch_connection_error_fails(authority):
    authority.down = True
    with pytest.raises(UpstreamUnavailable):
        await _provider(authority).fetch_public_key()


@pytest.mark.asyncio
async def test_fetch_timeout_fails():
    def handler(request):
        raise httpx.ReadTimeout("stalled", request=request)

    with pytest.raises(UpstreamUnavailable):
        await _provider(handler, timeout=0.1).fetch_public_key()


@pytest.mark.asyncio
async def test_fetch_empty_body_fails():
    with pytest.raises(UpstreamUnavailable):
        await _provider(lambda r: httpx.Response(200, content=b"  \n")).fetch_public_key()


@pytest.mark.asyncio
async def test_no_cache_by_default(authority):
    """Every call goes to the authority, so rotation is immediate."""
    keys = _provider(authority)
    first = await keys.fetch_public_key()

    authority.pem = b"-----BEGIN PUBLIC KEY-----\nrotated\n-----END PUBLIC KEY-----"
    second = await keys.fetch_public_key()

    assert authority.calls == 2
    assert first != second


@pytest.mark.asyncio
async def test_ttl_cache_reuses_key(authority):
    keys = _provider(authority, cache_ttl=60)
    await keys.fetch_public_key()
    await keys.fetch_public_key()
    assert authority.calls == 1

    keys.invalidate()
    await keys.fetch_public_key()
    assert authority.calls == 2


@pytest.mark.asyncio
async def test_failures_are_not_cached():
    authority = KeyAuthority(b"-----BEGIN PUBLIC KEY-----\nk\n-----END PUBLIC KEY-----")
    authority.down = True
    keys = _provider(authority, cache_ttl=60)

    with pytest.raises(UpstreamUnavailable):
        await keys.fetch_public_key()

    authority.down = False
    assert await keys.fetch_public_key() == authority.pem
    assert authority.calls == 2
