# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from repwatch import __version__
from repwatch.api.middleware import RateLimitMiddleware, RequestMiddleware
from repwatch.api.routes import blacklist, checks, domains, health
from repwatch.core.exceptions import (
    AuthConfigError,
    ConfigurationError,
    PersistenceError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger("repwatch.api.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    from repwatch.core.config import get_settings
    from repwatch.orchestrator import AggregationOrchestrator
    from repwatch.storage.database import close_db, init_repository

    settings = get_settings()
    repository = await init_repository(
        backend=settings.db_backend,
        db_path=settings.db_path,
        auto_migrate=settings.auto_migrate,
    )
    app.state.orchestrator = AggregationOrchestrator.from_settings(settings, repository)

    yield

    app.state.orchestrator = None
    await close_db()


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


async def _validation_error(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": str(exc)})


async def _auth_config_error(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=403,
        content={
            "success": False,
            "message": str(exc),
            "source": getattr(exc, "source", None),
        },
    )


async def _upstream_error(request: Request, exc: Exception) -> JSONResponse:
    content: dict[str, object] = {
        "success": False,
        "message": str(exc),
        "source": getattr(exc, "source", None),
    }
    if isinstance(exc, UpstreamError):
        if exc.status is not None:
            content["status"] = exc.status
        if isinstance(exc.detail, (dict, list, str)):
            content["details"] = exc.detail
    return JSONResponse(status_code=502, content=content)


async def _persistence_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Storage failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=503, content={"success": False, "message": "Storage unavailable"}
    )


async def _configuration_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Configuration error: %s", exc)
    return JSONResponse(status_code=500, content={"success": False, "message": str(exc)})


def create_app() -> FastAPI:
    from repwatch.core.config import get_settings

    settings = get_settings()

    app = FastAPI(
        title="repwatch",
        description="Domain reputation aggregation service",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.orchestrator = None

    # The browser extension calls from a chrome-extension:// origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(checks.router, prefix="/api/v1", tags=["checks"])
    app.include_router(blacklist.router, prefix="/api/v1", tags=["blacklist"])
    app.include_router(domains.router, prefix="/api/v1", tags=["domains"])
    app.add_middleware(RequestMiddleware)
    app.add_middleware(RateLimitMiddleware)

    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(AuthConfigError, _auth_config_error)
    app.add_exception_handler(UpstreamError, _upstream_error)
    app.add_exception_handler(PersistenceError, _persistence_error)
    app.add_exception_handler(ConfigurationError, _configuration_error)

    return app
