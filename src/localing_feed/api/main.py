"""FastAPI application factory and entry point.

Creates the application instance, builds the pagination executor once for
the process, registers middleware and mounts the list routers.

Usage::

    # Development server (from project root)
    uvicorn localing_feed.api.main:app --reload

    # Production
    gunicorn localing_feed.api.main:app -k uvicorn.workers.UvicornWorker
"""

from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from localing_feed.config.settings import Settings, get_settings
from localing_feed.core.logging_config import configure_logging, request_id_var
from localing_feed.store import build_executor
from localing_feed.store.base import PaginationExecutor

configure_logging("INFO")

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    executor: Optional[PaginationExecutor] = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Args:
        settings: Settings to use instead of :func:`get_settings`.
        executor: Pagination executor to use instead of the one named by
            ``settings.store_backend``.  Tests pass a fake here.

    Returns:
        A fully configured ``FastAPI`` instance.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description="Paginated read API over published media and content.",
        version="0.1.0",
        debug=settings.debug,
        redirect_slashes=False,
    )
    application.state.settings = settings
    application.state.executor = executor or build_executor(settings)

    # ---- Middleware --------------------------------------------------------

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Bind a request ID to the log context and log status and duration."""
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = None
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

        response.headers["X-Request-ID"] = request_id
        return response

    # ---- Routers -----------------------------------------------------------

    from localing_feed.api.routes import content, media  # noqa: PLC0415

    application.include_router(content.router, prefix="/content", tags=["content"])
    application.include_router(media.router, prefix="/media", tags=["media"])

    # ---- Lifecycle events -------------------------------------------------

    @application.on_event("startup")
    async def on_startup() -> None:
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            store_backend=settings.store_backend,
            environment=settings.environment,
            log_level=settings.log_level,
        )

    @application.on_event("shutdown")
    async def on_shutdown() -> None:
        """Release store connections."""
        await application.state.executor.close()
        logger.info("application_shutdown")

    @application.get("/health", tags=["system"])
    async def health() -> JSONResponse:
        """Return process liveness without touching the store."""
        return JSONResponse({"status": "ok"})

    return application


app = create_app()
"""The ASGI application passed to Uvicorn / Gunicorn."""
