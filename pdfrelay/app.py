"""
Application factory - builds FastAPI app with all middleware and routes.
"""

import asyncio
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdfrelay import __version__
from pdfrelay.config import Settings, get_settings

# Import routers
from pdfrelay.modules.health.router import router as health_router
from pdfrelay.modules.render.router import router as render_router
from pdfrelay.modules.version.router import router as version_router
from pdfrelay.shared.errors import PdfRelayError
from pdfrelay.shared.ids import generate_request_id
from pdfrelay.shared.logging import (
    clear_request_context,
    get_logger,
    set_request_context,
    setup_logging,
)
from pdfrelay.shared.types import RequestContext

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()

    setup_logging(settings.log_level)
    logger.info(
        f"Server started, listening on port {settings.port}, "
        f"request timeout {settings.request_timeout_seconds} seconds"
    )

    yield

    logger.info("pdfrelay stopped")


def _client_ip(request: Request) -> str | None:
    """Client address, trusting X-Real-IP / X-Forwarded-For from a proxy."""
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _error_body(error: dict[str, Any], ctx: RequestContext | None) -> dict[str, Any]:
    return {"error": error, "request_id": ctx.request_id if ctx else None}


def build_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="pdfrelay",
        description="HTML to PDF rendering with WeasyPrint and optional file sharing",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request context, deadline and access log
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Response:
        """Attach request context and enforce the request deadline."""
        ctx = RequestContext(
            request_id=request.headers.get("X-Request-ID") or generate_request_id(),
            client_ip=_client_ip(request),
        )
        set_request_context(ctx)
        request.state.context = ctx

        timeout = settings.request_timeout_seconds
        started = time.monotonic()
        request.state.deadline = started + timeout

        try:
            try:
                response = await asyncio.wait_for(call_next(request), timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Request exceeded {timeout}s deadline")
                response = JSONResponse(
                    status_code=504,
                    content=_error_body(
                        {"code": "TIMEOUT", "message": "request timed out"}, ctx
                    ),
                )

            response.headers["X-Request-ID"] = ctx.request_id
            elapsed_ms = int((time.monotonic() - started) * 1000)
            logger.info(
                f'{ctx.client_ip} "{request.method} {request.url.path}" '
                f"{response.status_code} {elapsed_ms}ms"
            )
            return response
        finally:
            clear_request_context()

    @app.exception_handler(PdfRelayError)
    async def pdfrelay_error_handler(request: Request, exc: PdfRelayError) -> JSONResponse:
        """Handle PdfRelayError with consistent JSON response."""
        ctx = getattr(request.state, "context", None)
        return JSONResponse(status_code=exc.http_status, content=_error_body(exc.to_dict(), ctx))

    # Register routers
    app.include_router(health_router, tags=["health"])
    app.include_router(render_router)
    app.include_router(version_router)

    return app
