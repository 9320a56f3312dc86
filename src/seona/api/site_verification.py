"""Site verification token API — a single opaque string option.

Learn: Passthrough to the option store. Reading is open (search
engines' verification flows need no credentials); setting and clearing
require a Seona signature. The token may arrive as a form field or in a
JSON object body; anything else that isn't a string is a 400.
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from seona.auth.dependencies import require_signature
from seona.context import SiteContext, get_context
from seona.db.engine import get_db
from seona.errors import BadRequest, NotFound
from seona.services.option_store import OptionStore

router = APIRouter(prefix="/v1/site-verification-token")


_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _submitted_token(request: Request) -> Any:
    """The `token` field of a form or JSON object body, else None."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return form.get("token")

    raw = await request.body()
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        return None
    return payload.get("token") if isinstance(payload, dict) else None


@router.get("", response_model=str)
async def get_site_verification_token(
    db: AsyncSession = Depends(get_db),
    ctx: SiteContext = Depends(get_context),
):
    token = await OptionStore(db).get(ctx.settings.site_verification_token_option)
    if token is None:
        raise NotFound(
            "Unable to retrieve Site Verification token",
            code="get-google-site-verification",
        )
    return token


@router.post("", status_code=204, dependencies=[Depends(require_signature)])
async def update_site_verification_token(
    request: Request,
    db: AsyncSession = Depends(get_db),
    ctx: SiteContext = Depends(get_context),
):
    token = await _submitted_token(request)
    if not isinstance(token, str):
        raise BadRequest(
            "Unable to update the Site Verification token",
            code="update-google-site-verification",
        )
    await OptionStore(db).update(ctx.settings.site_verification_token_option, token)
    return Response(status_code=204)


@router.delete("", status_code=204, dependencies=[Depends(require_signature)])
async def delete_site_verification_token(
    db: AsyncSession = Depends(get_db),
    ctx: SiteContext = Depends(get_context),
):
    deleted = await OptionStore(db).delete(ctx.settings.site_verification_token_option)
    if not deleted:
        raise NotFound(
            "Unable to delete Site Verification token",
            code="delete-google-site-verification",
        )
    return Response(status_code=204)
