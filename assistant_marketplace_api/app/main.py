"""
Main entrypoint for the Assistant Marketplace API.

This module assembles the FastAPI application, sets up logging,
attaches the record store and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Run it with uvicorn or
another ASGI server, e.g.::

    uvicorn assistant_marketplace_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.errors import MarketplaceError
from .core.logging_config import setup_logging
from .services.user_service import UserService
from .storage import Storage, build_storage

logger = logging.getLogger(__name__)


def _format_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.error},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as 400 rather than FastAPI's default 422."""
    return JSONResponse(
        status_code=400,
        content={"detail": _format_validation_errors(exc.errors()), "error": "validation_error"},
    )


async def pydantic_error_handler(request: Request, exc: PydanticValidationError) -> JSONResponse:
    logger.warning("Record validation failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"detail": _format_validation_errors(exc.errors()), "error": "validation_error"},
    )


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    storage : Optional[Storage]
        Record store to serve from.  When omitted, one is built from
        ``settings.storage_backend``.  Tests pass a fresh store so that
        every application starts empty.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the rest of the
    # setup can log.
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Provision the configured administrator, if any.
        if settings.admin_username and settings.admin_email and settings.admin_password:
            await UserService.ensure_admin(
                app.state.storage,
                settings.admin_username,
                settings.admin_email,
                settings.admin_password,
            )
        logger.info("%s %s started", settings.project_name, settings.api_version)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.storage = storage if storage is not None else build_storage(settings)

    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(PydanticValidationError, pydantic_error_handler)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
