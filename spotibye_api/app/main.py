"""
Main entrypoint for the SpotiBye Track Catalog API.

This module assembles the FastAPI application, sets up logging, CORS,
error handlers and the lifespan hook that creates the schema, and
includes the versioned routers.  The ``create_app`` function builds
and configures the app, which is then instantiated at module import
time as ``app``::

    uvicorn spotibye_api.app.main:app --reload

Routes are served under ``/api/v1`` and, for existing clients, under
the unversioned ``/api`` prefix as well.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import TrackNotFoundError, TrackValidationError, build_error_response
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _error_response(request: Request, exc: Exception) -> JSONResponse:
    status_code, body = build_error_response(exc, request.url.path)
    headers = getattr(exc, "headers", None)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Validation error on %s: %s", request.url.path, exc)
    return _error_response(request, exc)


async def handle_not_found(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Resource not found: %s", exc)
    return _error_response(request, exc)


async def handle_http_error(request: Request, exc: Exception) -> JSONResponse:
    logger.info("%s %s -> %s", request.method, request.url.path, getattr(exc, "status_code", "?"))
    return _error_response(request, exc)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Internal server error on %s", request.url.path, exc_info=exc)
    return _error_response(request, exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Creates the database file and schema if missing
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log
    setup_logging(
        settings.log_level,
        settings.log_file or None,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/api/v1")
    app.include_router(v1_router, prefix="/api", include_in_schema=False)

    app.add_exception_handler(TrackValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(TrackNotFoundError, handle_not_found)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
