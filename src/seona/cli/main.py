"""Seona CLI — run the server and manage the site identity.

Usage:
    seona serve                      # Run the API with uvicorn
    seona activate                   # Create the site identifier (idempotent)
    seona identifier                 # Print the site identifier
    seona challenge                  # Print the challenge for the current key
    seona version                    # Print the connector version
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from typing import Awaitable, Callable, Optional, TypeVar

import click

from seona import __version__
from seona.auth.challenge import build_challenge
from seona.auth.crypto import CryptoVerifier
from seona.auth.identity import IdentityStore
from seona.auth.keys import KeyProvider
from seona.config import settings
from seona.db.engine import build_engine, build_session_factory, init_db
from seona.errors import SeonaError
from seona.services.option_store import OptionStore

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop — normal CLI invocation
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


async def _with_identity(
    database_url: Optional[str],
    fn: Callable[[IdentityStore], Awaitable[T]],
) -> T:
    """Open the site database, hand an IdentityStore to `fn`, clean up."""
    engine = build_engine(database_url or settings.database_url)
    try:
        await init_db(engine)
        async with build_session_factory(engine)() as session:
            identity = IdentityStore(OptionStore(session))
            return await fn(identity)
    finally:
        await engine.dispose()


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


database_url_option = click.option(
    "--database-url",
    default=None,
    help="Database URL (defaults to SEONA_DATABASE_URL).",
)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
def cli():
    """Seona Connector — signed content API for the Seona platform."""


@cli.command()
@click.option("--host", default=None, help="Bind address.")
@click.option("--port", type=int, default=None, help="Bind port.")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "seona.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command()
@database_url_option
def activate(database_url: Optional[str]):
    """Create the site identifier if it doesn't exist, and print it."""
    identifier = _run(
        _with_identity(database_url, lambda identity: identity.ensure_identifier())
    )
    click.echo(identifier)


@cli.command()
@database_url_option
def identifier(database_url: Optional[str]):
    """Print the site identifier."""
    value = _run(
        _with_identity(database_url, lambda identity: identity.get_identifier())
    )
    if value is None:
        _fail("site is not activated (run `seona activate`)")
    click.echo(value)


@cli.command()
@database_url_option
@click.option(
    "--key-endpoint",
    default=None,
    help="Key authority URL (defaults to SEONA_KEY_ENDPOINT).",
)
def challenge(database_url: Optional[str], key_endpoint: Optional[str]):
    """Print the base64 challenge for the authority's current key."""
    keys = KeyProvider(
        key_endpoint or settings.key_endpoint,
        timeout=settings.key_fetch_timeout_seconds,
    )
    verifier = CryptoVerifier()
    try:
        value = _run(
            _with_identity(
                database_url,
                lambda identity: build_challenge(identity, keys, verifier),
            )
        )
    except SeonaError as e:
        _fail(e.message)
    click.echo(value)


@cli.command()
def version():
    """Print the connector version."""
    click.echo(__version__)


def main():
    cli()


if __name__ == "__main__":
    main()
