"""FastAPI auth dependencies.

Learn: require_signature is used as Depends() on every protected route
(or router). It runs the AuthenticationGate and raises on failure, so
handlers only ever execute for requests signed by the Seona platform.

Every rejection other than a missing header collapses to the same
generic 401 — callers can't tell a bad signature from an unreachable
key authority or an unactivated site.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from seona.auth.gate import AuthenticationGate, AuthOutcome
from seona.auth.identity import IdentityStore
from seona.context import SiteContext, get_context
from seona.db.engine import get_db
from seona.errors import BadRequest, Unauthorized
from seona.services.option_store import OptionStore

logger = structlog.get_logger()


def get_gate(
    db: AsyncSession = Depends(get_db),
    ctx: SiteContext = Depends(get_context),
) -> AuthenticationGate:
    identity = IdentityStore(
        OptionStore(db), option_name=ctx.settings.identifier_option
    )
    return AuthenticationGate(identity, ctx.keys, ctx.verifier)


async def require_signature(
    signature: Optional[str] = Header(None),
    gate: AuthenticationGate = Depends(get_gate),
) -> None:
    """Reject the request unless its Signature header verifies."""
    result = await gate.authenticate(signature)
    if result.ok:
        return

    logger.info("auth.rejected", outcome=result.outcome.value, reason=result.reason)
    if result.outcome is AuthOutcome.BAD_REQUEST:
        raise BadRequest("Missing Signature header")
    raise Unauthorized()
