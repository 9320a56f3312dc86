"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown: schema creation, site
activation (the one-time identifier), engine disposal. Everything the
app needs is built from the Settings passed in: the SiteContext (key
provider + verifier), the engine and session factory, the route prefix.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from seona import __version__
from seona.api import api_router
from seona.config import Settings, settings
from seona.context import build_context
from seona.db.engine import build_engine, build_session_factory
from seona.errors import InternalFailure, SeonaError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    app_settings: Settings = app.state.context.settings
    logger.info(
        "seona.starting",
        version=__version__,
        environment=app_settings.environment,
        port=app_settings.port,
    )

    from seona.db.engine import init_db

    await init_db(app.state.engine)
    Path(app_settings.media_dir).mkdir(parents=True, exist_ok=True)

    if app_settings.auto_activate:
        from seona.auth.identity import IdentityStore
        from seona.services.option_store import OptionStore

        async with app.state.session_factory() as session:
            identity = IdentityStore(
                OptionStore(session), option_name=app_settings.identifier_option
            )
            await identity.ensure_identifier()
        logger.info("seona.activated")

    yield

    logger.info("seona.shutdown")
    await app.state.engine.dispose()


async def seona_error_handler(request: Request, exc: SeonaError) -> JSONResponse:
    """Render service errors as {"code", "message"} with the class's status."""
    if exc.status_code >= 500:
        logger.error(
            "request.failed",
            code=exc.code,
            status=exc.status_code,
            cause=type(exc.__cause__).__name__ if exc.__cause__ else None,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything that isn't a SeonaError becomes a generic internal failure."""
    logger.error("request.unhandled", error=type(exc).__name__)
    failure = InternalFailure()
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Seona Connector",
        description="Signed, ownership-scoped content API for the Seona platform",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = build_context(app_settings)
    app.state.engine = build_engine(app_settings.database_url, echo=app_settings.debug)
    app.state.session_factory = build_session_factory(app.state.engine)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → handler

    from seona.middleware.request_id import RequestIdMiddleware
    from seona.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        SecurityHeadersMiddleware, api_prefix=f"/{app_settings.namespace}/"
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(SeonaError, seona_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Mount API routes under the namespace
    app.include_router(api_router, prefix=f"/{app_settings.namespace}")

    # Uploaded thumbnails
    app.mount(
        "/media",
        StaticFiles(directory=app_settings.media_dir, check_dir=False),
        name="media",
    )

    return app


# Default app instance (used by uvicorn: seona.main:app)
app = create_app()
