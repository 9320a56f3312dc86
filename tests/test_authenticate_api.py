"""Challenge, version and response header tests."""

import base64

import pytest
from cryptography.hazmat.primitives.asymmetric import padding

from seona import __version__


@pytest.mark.asyncio
async def test_challenge_decrypts_to_identifier(client, identifier, private_key):
    resp = await client.get("/seona/v1/authenticate")
    assert resp.status_code == 200

    ciphertext = base64.b64decode(resp.json())
    assert private_key.decrypt(ciphertext, padding.PKCS1v15()) == identifier.encode()


@pytest.mark.asyncio
async def test_challenge_needs_no_signature(client, identifier, authority):
    resp = await client.get("/seona/v1/authenticate")
    assert resp.status_code == 200
    assert authority.calls == 1


@pytest.mark.asyncio
async def test_challenge_authority_down(client, identifier, authority):
    authority.down = True
    resp = await client.get("/seona/v1/authenticate")
    assert resp.status_code == 503
    assert resp.json()["code"] == "upstream-unavailable"
    assert identifier not in resp.text


@pytest.mark.asyncio
async def test_challenge_malformed_key(client, identifier, authority):
    authority.pem = b"<html>maintenance</html>"
    resp = await client.get("/seona/v1/authenticate")
    assert resp.status_code == 500
    assert resp.json()["code"] == "encrypt"
    assert identifier not in resp.text


@pytest.mark.asyncio
async def test_challenge_before_activation(client):
    resp = await client.get("/seona/v1/authenticate")
    assert resp.status_code == 500
    assert resp.json()["code"] == "not-activated"


@pytest.mark.asyncio
async def test_version(client):
    resp = await client.get("/seona/v1/version")
    assert resp.status_code == 200
    assert resp.json() == __version__ == "1.0.3"


@pytest.mark.asyncio
async def test_response_headers(client):
    resp = await client.get("/seona/v1/version")
    assert resp.headers["X-Request-ID"]
    assert resp.headers["Cache-Control"] == "no-store"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    resp = await client.get("/seona/v1/version", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"
