"""Catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, error mapping and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_api.api.errors import register_exception_handlers
from catalog_api.api.health import router as health_router
from catalog_api.api.middleware import setup_middleware
from catalog_api.api.products import router as products_router
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.database import create_tables, dispose_engine
from catalog_api.infrastructure.logging_config import configure_logging

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting Catalog API",
        version=settings.api_version,
        debug=settings.debug,
        storage_backend=settings.storage_backend,
    )

    if settings.storage_backend == "database":
        await create_tables()
        logger.info("Database tables ready")

    yield

    # Shutdown
    await dispose_engine()
    logger.info("Shutting down Catalog API")


app = FastAPI(
    title="Catalog API",
    description="Product catalog with geo and keyword search",
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

# Setup custom middleware (request context, error handling)
setup_middleware(app)

# Map domain and request errors to ErrorResponse
register_exception_handlers(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
