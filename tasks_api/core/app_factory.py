"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and the
rate limiter sweep) so tests can build isolated instances.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import Depends, FastAPI

from tasks_api.api.routes import generation_router, health_router
from tasks_api.core.config import settings
from tasks_api.core.exception_handlers import setup_exception_handlers
from tasks_api.core.logging import configure_logging
from tasks_api.core.middleware import request_id_middleware
from tasks_api.core.openapi import apply_openapi_customizations
from tasks_api.core.rate_limit import enforce_rate_limit, run_rate_limit_sweeper

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the limiter sweep for the lifetime of the app."""
    sweeper = asyncio.create_task(run_rate_limit_sweeper(), name="rate-limit-sweeper")
    logger.info("app.startup", extra={"app_env": settings.app_env})
    try:
        yield
    finally:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        logger.info("app.shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Tasks API",
        description=(
            "Task generation API: produces task content, super prompts and prompt "
            "rewrites through interchangeable AI providers (OpenAI, Claude, Gemini, "
            "Grok). Requires X-API-Key and enforces a per-client rate limit."
        ),
        version="0.1.0",
        lifespan=lifespan,
        # Admission control runs before any route dependency (including auth)
        dependencies=[Depends(enforce_rate_limit)],
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(generation_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
