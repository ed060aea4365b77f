"""API middleware for the PIM API.

Provides:
- Request ID correlation
- API key authentication
- Error handling

All error bodies share the ErrorResponse shape, built by error_response.
"""

import secrets
import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pim.infrastructure.config import settings

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error response carrying the request ID.

    Args:
        request: Request that failed.
        status_code: HTTP status code.
        error_code: Machine-readable error code.
        message: Human-readable message.
        details: Optional field level details.
        headers: Optional extra response headers.

    Returns:
        JSON error response.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags every request with an ID and logs its completion.

    The ID comes from the X-Request-ID header when the client sends one.
    It is bound to the structlog context for the duration of the request
    and echoed in the response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# API Key Authentication Middleware
# ============================================================================


# Paths that don't require authentication
PUBLIC_PATHS = frozenset({"/health", "/ready", "/openapi.json"})
PUBLIC_PREFIXES = ("/docs", "/redoc")


def is_public_path(path: str) -> bool:
    """Check if a path is served without authentication."""
    path = path.rstrip("/") or "/"
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Requires "Authorization: Bearer <api_key>" on protected paths."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Validate the API key, or answer 401.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or 401 error.
        """
        if is_public_path(request.url.path):
            return await call_next(request)

        scheme, _, api_key = request.headers.get("Authorization", "").partition(" ")
        if not scheme:
            error_code, message = "UNAUTHORIZED", "Missing Authorization header"
        elif scheme.lower() != "bearer" or not api_key:
            error_code = "UNAUTHORIZED"
            message = "Invalid Authorization header format. Use 'Bearer <api_key>'"
        elif not secrets.compare_digest(api_key, settings.pim_api_key):
            error_code, message = "INVALID_API_KEY", "Invalid API key"
        else:
            request.state.authenticated = True
            return await call_next(request)

        logger.warning(
            "Request rejected",
            reason=error_code,
            path=request.url.path,
            method=request.method,
        )
        return error_response(
            request,
            status.HTTP_401_UNAUTHORIZED,
            error_code,
            message,
            headers={"WWW-Authenticate": "Bearer"},
        )


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping the routes into 500 error responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
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
    # Error handling (closest to the routes)
    app.add_middleware(ErrorHandlerMiddleware)

    # API key authentication
    app.add_middleware(ApiKeyMiddleware)

    # Request ID correlation (outermost, auth failures carry an id too)
    app.add_middleware(RequestIdMiddleware)
