"""API middleware for the catalog API.

Provides:
- Per-request context (correlation ID, deadline, access log)
- Last-resort error handling
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from catalog_api.api.errors import error_response
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.context import RequestContext

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def resolve_request_id(header_value: str | None) -> str:
    """Pick the correlation ID for a request.

    The caller's ID is reused when it is short printable text; anything
    else is replaced by a fresh UUID so it cannot pollute the logs.
    """
    if header_value:
        candidate = header_value.strip()
        if candidate and len(candidate) <= MAX_REQUEST_ID_LENGTH and candidate.isprintable():
            return candidate
    return str(uuid4())


# ============================================================================
# Request Context Middleware
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Open a RequestContext for every request.

    The context is stored on ``request.state.context`` for the route
    dependencies, so the deadline starts when the request arrives rather
    than when the handler runs. The correlation ID is also bound into
    structlog contextvars and echoed in the response header.
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float | None = None) -> None:
        """Initialize middleware.

        Args:
            app: Wrapped ASGI application.
            timeout_seconds: Per-request time budget, ``None`` or <= 0 for none.
        """
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Run the request inside its context.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with the correlation header.
        """
        ctx = RequestContext.create(
            request_id=resolve_request_id(request.headers.get(REQUEST_ID_HEADER)),
            timeout_seconds=self.timeout_seconds,
        )
        request.state.request_id = ctx.request_id
        request.state.context = ctx

        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        start_time = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=ctx.request_id):
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                logger.info(
                    "Request completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    deadline_exceeded=ctx.expired,
                )

        response.headers[REQUEST_ID_HEADER] = ctx.request_id
        return response


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Answer unhandled exceptions with a 500 in the standard error shape.

    Domain errors never get here; they are mapped by the exception
    handlers in ``catalog_api.api.errors``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Handle errors uniformly.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or error response.
        """
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
            )
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    # Error handling (wraps handlers, inside the request context)
    app.add_middleware(ErrorHandlerMiddleware)

    # Request context (outermost)
    app.add_middleware(
        RequestContextMiddleware,
        timeout_seconds=settings.request_timeout_seconds,
    )
