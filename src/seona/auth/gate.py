"""Authentication gate — one pass/fail decision per protected request.

Learn: Reads the identifier, fetches the current key, verifies the
signature. Returns a typed result instead of raising so callers branch
on it uniformly; the FastAPI dependency in auth.dependencies turns a
failed result into an error response.

Nothing is cached between calls: every protected request costs one
round-trip to the key authority (unless KeyProvider caching is on).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog

from seona.auth.crypto import CryptoVerifier
from seona.auth.identity import IdentityStore
from seona.auth.keys import KeyProvider
from seona.errors import UpstreamUnavailable

logger = structlog.get_logger()


class AuthOutcome(Enum):
    OK = "ok"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"


@dataclass
class AuthResult:
    """Result of authenticating one request.

    Attributes:
        outcome: Pass, bad request, or unauthorized
        reason: Internal reason for logging; never sent to the caller
    """
    outcome: AuthOutcome
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is AuthOutcome.OK

    @classmethod
    def passed(cls) -> "AuthResult":
        return cls(AuthOutcome.OK)

    @classmethod
    def bad_request(cls, reason: str) -> "AuthResult":
        return cls(AuthOutcome.BAD_REQUEST, reason)

    @classmethod
    def unauthorized(cls, reason: str) -> "AuthResult":
        return cls(AuthOutcome.UNAUTHORIZED, reason)


class AuthenticationGate:
    """Verifies the Signature header of an inbound request."""

    def __init__(
        self,
        identity: IdentityStore,
        keys: KeyProvider,
        verifier: CryptoVerifier,
    ):
        self.identity = identity
        self.keys = keys
        self.verifier = verifier

    async def authenticate(self, signature: Optional[str]) -> AuthResult:
        if signature is None:
            return AuthResult.bad_request("missing signature")

        identifier = await self.identity.get_identifier()
        if identifier is None:
            logger.error("auth.not_activated")
            return AuthResult.unauthorized("identifier missing")

        try:
            public_key = await self.keys.fetch_public_key()
        except UpstreamUnavailable:
            return AuthResult.unauthorized("key authority unavailable")

        if not self.verifier.verify(identifier, signature, public_key):
            return AuthResult.unauthorized("signature mismatch")

        return AuthResult.passed()
