"""Site identifier + option store tests."""

import re

import pytest

from seona.auth.identity import IdentityStore
from seona.services.option_store import OptionStore


@pytest.mark.asyncio
async def test_identifier_absent_before_activation(identity):
    assert await identity.get_identifier() is None


@pytest.mark.asyncio
async def test_ensure_identifier_generates_hex_token(identity):
    identifier = await identity.ensure_identifier()
    assert re.fullmatch(r"[0-9a-f]{32}", identifier)
    assert await identity.get_identifier() == identifier


@pytest.mark.asyncio
async def test_ensure_identifier_is_idempotent(identity):
    """A second activation never changes the stored value."""
    first = await identity.ensure_identifier()
    second = await identity.ensure_identifier()
    assert first == second
    assert await identity.get_identifier() == first


@pytest.mark.asyncio
async def test_ensure_identifier_never_overwrites_existing(db_session, test_settings):
    options = OptionStore(db_session)
    await options.update(test_settings.identifier_option, "installed-earlier")

    identity = IdentityStore(options, option_name=test_settings.identifier_option)
    assert await identity.ensure_identifier() == "installed-earlier"


@pytest.mark.asyncio
async def test_option_add_is_insert_only(db_session):
    options = OptionStore(db_session)
    assert await options.add("seona_example", "first") is True
    assert await options.add("seona_example", "second") is False
    assert await options.get("seona_example") == "first"


@pytest.mark.asyncio
async def test_option_delete(db_session):
    options = OptionStore(db_session)
    await options.update("seona_example", "value")
    assert await options.delete("seona_example") is True
    assert await options.get("seona_example") is None
    assert await options.delete("seona_example") is False
