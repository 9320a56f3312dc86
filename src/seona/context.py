"""Per-application context shared by all handlers.

Learn: Instead of a global plugin object, create_app() builds one
SiteContext and stores it on app.state. Routes receive it through the
get_context dependency, and tests swap it out with
app.dependency_overrides — e.g. to point KeyProvider at a mock
transport.
"""

from dataclasses import dataclass

from fastapi import Request

from seona.auth.crypto import CryptoVerifier
from seona.auth.keys import KeyProvider
from seona.config import Settings


@dataclass
class SiteContext:
    settings: Settings
    keys: KeyProvider
    verifier: CryptoVerifier


def build_context(settings: Settings) -> SiteContext:
    return SiteContext(
        settings=settings,
        keys=KeyProvider(
            settings.key_endpoint,
            timeout=settings.key_fetch_timeout_seconds,
            cache_ttl=settings.key_cache_ttl_seconds,
        ),
        verifier=CryptoVerifier(),
    )


def get_context(request: Request) -> SiteContext:
    """FastAPI dependency — the context built by create_app()."""
    return request.app.state.context
