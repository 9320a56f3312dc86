"""Challenge endpoint (open) and version endpoint.

Learn: /v1/authenticate is deliberately unauthenticated — it's how the
Seona platform confirms it is talking to the genuine site. Its failure
modes must not leak the identifier: an unreachable key authority is a
generic 503, an encryption failure a generic 500.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from seona import __version__
from seona.auth.challenge import build_challenge
from seona.auth.identity import IdentityStore
from seona.context import SiteContext, get_context
from seona.db.engine import get_db
from seona.services.option_store import OptionStore

router = APIRouter(prefix="/v1")


@router.get("/authenticate", response_model=str)
async def get_challenge(
    db: AsyncSession = Depends(get_db),
    ctx: SiteContext = Depends(get_context),
):
    """Return the identifier encrypted under the authority's current key."""
    identity = IdentityStore(
        OptionStore(db), option_name=ctx.settings.identifier_option
    )
    return await build_challenge(identity, ctx.keys, ctx.verifier)


@router.get("/version", response_model=str)
async def get_version():
    return __version__
