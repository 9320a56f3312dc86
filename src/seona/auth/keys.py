"""Public key retrieval from the remote key authority.

Learn: The key is fetched with a plain GET and treated as untrusted
until it is used — no pinning, and by default no caching, so a key
rotated by the authority takes effect on the very next request.

A positive `cache_ttl` keeps a fetched key for that many seconds.
Rotation then takes effect within one TTL; `invalidate()` forces a
refetch sooner.
"""

import time
from typing import Optional

import httpx
import structlog

from seona.errors import UpstreamUnavailable

logger = structlog.get_logger()


class KeyProvider:
    """Fetches the current PEM public key over HTTP."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 10.0,
        cache_ttl: float = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._transport = transport
        self._cached: Optional[bytes] = None
        self._cached_at = 0.0

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def fetch_public_key(self) -> bytes:
        """Return the PEM-encoded public key.

        Raises UpstreamUnavailable on transport errors, timeouts,
        non-2xx responses or an empty body. No retries.
        """
        if self._cached is not None and self._fresh():
            return self._cached

        try:
            async with self._client() as client:
                resp = await client.get(self.endpoint)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "keys.fetch_failed",
                endpoint=self.endpoint,
                status=e.response.status_code,
            )
            raise UpstreamUnavailable() from e
        except httpx.HTTPError as e:
            logger.warning(
                "keys.fetch_failed",
                endpoint=self.endpoint,
                error=type(e).__name__,
            )
            raise UpstreamUnavailable() from e

        key = resp.content.strip()
        if not key:
            logger.warning("keys.empty_response", endpoint=self.endpoint)
            raise UpstreamUnavailable()

        if self.cache_ttl > 0:
            self._cached = key
            self._cached_at = time.monotonic()
        return key

    def invalidate(self) -> None:
        """Drop any cached key."""
        self._cached = None
        self._cached_at = 0.0

    def _fresh(self) -> bool:
        return time.monotonic() - self._cached_at < self.cache_ttl
