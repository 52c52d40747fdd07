"""FastAPI application factory and entry point.

Usage::

    uvicorn news_desk.api.main:app
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response

from news_desk import __version__
from news_desk.config.settings import get_settings
from news_desk.core.logging_config import configure_logging, request_id_var

logger = structlog.get_logger(__name__)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application.

    Separated from the module-level ``app`` singleton so that tests can
    call ``create_app()`` with patched settings.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description="Scheduled AI news ingestion and Gemini-generated digests.",
        version=__version__,
        debug=settings.debug,
    )

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Tag each request with an id and log its status and duration."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("unhandled_exception", exc_info=exc)
            raise
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = getattr(response, "status_code", 500)
            log_fn = logger.warning if status_code >= 400 else logger.info
            log_fn("request_complete", status_code=status_code, elapsed_ms=elapsed_ms)
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response

    from news_desk.api.routes.digests import router as digests_router  # noqa: PLC0415
    from news_desk.api.routes.health import router as health_router  # noqa: PLC0415

    application.include_router(health_router)
    application.include_router(digests_router)

    return application


app = create_app()
