"""
Pokedex Catalog Application Entry Point

This module defines the FastAPI application instance, registers all routers
and exception handlers, and manages startup/shutdown through a lifespan
context.

Design Goals
------------
- Fail-fast startup: an unreachable database aborts the process
- Centralized router and exception handler registration
- Creation worker tied to the application lifecycle
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .core.errors import (
    CatalogError,
    catalog_error_handler,
    http_exception_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from .core.logging_config import setup_logging
from .db import async_engine, check_connection, create_tables
from .api import health_routes, pokemon_routes
from .api.dependencies import creation_queue


logger = logging.getLogger("pokedex.app")


# ---------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Verify the database, start the creation worker, and tear both down.
    """
    logger.info("Starting pokedex catalog")

    try:
        await check_connection()
    except Exception:
        logger.exception("Cannot connect to the database at startup")
        raise

    if settings.create_tables_on_startup:
        await create_tables()

    logger.info("Connected to the database successfully")

    creation_queue.start()
    try:
        yield
    finally:
        logger.info("Shutting down pokedex catalog")
        await creation_queue.stop()
        await async_engine.dispose()


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    setup_logging(settings.log_level)

    app = FastAPI(
        title="pokedex-api",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Routes & Static Assets
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(pokemon_routes.router)

    app.mount(
        "/assets",
        StaticFiles(directory=settings.assets_dir, check_dir=False),
        name="assets",
    )

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
