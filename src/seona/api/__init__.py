"""API route aggregation.

All routers registered here get mounted by create_app() under
/{namespace}, taken from the Settings the app is built with.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. The challenge and version
routes are open; site-verification-token mixes open reads with signed
writes, so it declares require_signature per route instead.
"""

from fastapi import APIRouter, Depends

from seona.api.authenticate import router as authenticate_router
from seona.api.posts import router as posts_router
from seona.api.site_verification import router as site_verification_router
from seona.api.users import router as users_router
from seona.auth.dependencies import require_signature

# All protected routers require a valid Signature header
_auth = [Depends(require_signature)]

api_router = APIRouter()

# Open routes — no signature required
api_router.include_router(authenticate_router, tags=["authenticate"])

# Mixed — signature on writes only
api_router.include_router(site_verification_router, tags=["site-verification"])

# Protected routes — require a valid signature
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
api_router.include_router(posts_router, tags=["posts"], dependencies=_auth)
