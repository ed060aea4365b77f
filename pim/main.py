"""PIM API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pim.api.category_tree import router as category_tree_router
from pim.api.health import router as health_router
from pim.api.middleware import error_response, setup_middleware
from pim.domain.exceptions import DomainError
from pim.infrastructure.config import settings
from pim.infrastructure.logging_config import configure_logging
from pim.infrastructure.search_client import SearchClientError, get_search_client

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    configure_logging()
    logger.info(
        "Starting PIM API",
        version=settings.api_version,
        debug=settings.debug,
        product_index=settings.product_index_name,
        count_sub_categories=settings.category_tree_count_sub_categories,
    )

    yield

    logger.info("Shutting down PIM API")
    await get_search_client().close()


app = FastAPI(
    title="PIM API",
    description="Product information management catalog backend",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, API key auth, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(category_tree_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        return error_response(
            request,
            exc.status_code,
            detail.get("error_code", "ERROR"),
            detail.get("message", str(detail)),
            detail.get("details", []),
        )
    return error_response(request, exc.status_code, "ERROR", str(detail))


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render domain errors as unprocessable requests."""
    logger.warning(
        "Domain error",
        path=request.url.path,
        error_code=exc.error_code,
        error=exc.message,
    )
    return error_response(
        request,
        422,
        exc.error_code,
        exc.message,
        [{"field": key, "message": str(value)} for key, value in exc.details.items()],
    )


@app.exception_handler(SearchClientError)
async def search_client_error_handler(
    request: Request, exc: SearchClientError
) -> JSONResponse:
    """Render search index failures as bad gateway errors."""
    logger.error(
        "Search index error",
        path=request.url.path,
        index=exc.index,
        status_code=exc.status_code,
        error=exc.message,
    )
    return error_response(
        request,
        502,
        "SEARCH_INDEX_ERROR",
        "The product search index could not be queried",
        [{"field": "index", "message": exc.index}],
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return error_response(request, 500, "INTERNAL_ERROR", "An internal error occurred")
