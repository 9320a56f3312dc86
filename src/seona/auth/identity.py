"""Site identifier storage.

The identifier is 16 random bytes, hex-encoded, created once on
activation and never rotated.
"""

import secrets

import structlog

from seona.config import settings
from seona.services.option_store import OptionStore

logger = structlog.get_logger()

IDENTIFIER_BYTES = 16


class IdentityStore:
    """Persists and retrieves the single opaque site identifier."""

    def __init__(self, options: OptionStore, option_name: str | None = None):
        self.options = options
        self.option_name = option_name or settings.identifier_option

    async def get_identifier(self) -> str | None:
        return await self.options.get(self.option_name)

    async def ensure_identifier(self) -> str:
        """Return the identifier, generating it on first call.

        Never overwrites: if another writer got there first, their value
        is re-read and returned.
        """
        current = await self.get_identifier()
        if current is not None:
            return current

        identifier = secrets.token_bytes(IDENTIFIER_BYTES).hex()
        if await self.options.add(self.option_name, identifier):
            logger.info("identity.created", option=self.option_name)
            return identifier

        return await self.get_identifier()
