"""
Catalog Error Handling

This module defines the error kinds raised by the catalog core and the
application-wide exception handlers that turn them into HTTP responses.

Error Kinds
-----------
- CatalogValidationError : missing/malformed parameter or schema violation (400)
- PokemonNotFoundError   : no record carries the requested id (404)
- StoreError             : the record store failed for any other reason (500)

Every error response body is a JSON object with a single ``error`` field.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("pokedex.errors")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class CatalogError(Exception):
    """Base class for errors surfaced to API clients with their message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CatalogValidationError(CatalogError):
    """Raised when a request parameter or body does not satisfy the schema."""

    status_code = status.HTTP_400_BAD_REQUEST


class PokemonNotFoundError(CatalogError):
    """Raised when no record matches the requested logical id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Pokemon not found") -> None:
        super().__init__(message)


class StoreError(CatalogError):
    """Raised when the underlying record store operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Flatten pydantic error dictionaries into a single readable message.

    Example: ``base.HP: Field required; type: Input should be a valid list``
    """
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """
    Convert a CatalogError into its HTTP status with the message as body.
    """
    if exc.status_code >= 500:
        logger.error(
            "Store failure during request %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Report body/parameter schema violations as 400 instead of FastAPI's 422.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": format_validation_errors(exc.errors())},
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """
    Give routing errors (unknown path, wrong method) the same body shape.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full stack trace internally and returns a generic 500 so that
    no internal details leak to the client.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )
