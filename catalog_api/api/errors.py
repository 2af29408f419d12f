"""Error responses for the catalog API.

Every failure leaves the API in the ErrorResponse shape. Domain errors
are mapped to status codes here; nothing else in the API layer decides
a status for an error.
"""

from collections.abc import Sequence
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.domain.exceptions import (
    DomainError,
    InvalidFilterError,
    MalformedIdentifierError,
    OperationCancelledError,
    PersistenceError,
    ProductNotFoundError,
    ProductValidationError,
)

logger = structlog.get_logger()

ErrorDetails = list[dict[str, Any]]

# Starlette renamed HTTP_422_UNPROCESSABLE_ENTITY; the number is stable.
HTTP_422_UNPROCESSABLE = 422

# Body-level error types meaning the body is not a JSON object at all.
MALFORMED_BODY_ERRORS = frozenset({"json_invalid", "dict_type", "missing"})


DOMAIN_ERROR_STATUS: dict[type[DomainError], tuple[int, str]] = {
    InvalidFilterError: (status.HTTP_400_BAD_REQUEST, "INVALID_FILTER"),
    MalformedIdentifierError: (status.HTTP_400_BAD_REQUEST, "MALFORMED_IDENTIFIER"),
    ProductValidationError: (HTTP_422_UNPROCESSABLE, "VALIDATION_ERROR"),
    ProductNotFoundError: (status.HTTP_404_NOT_FOUND, "PRODUCT_NOT_FOUND"),
    OperationCancelledError: (status.HTTP_504_GATEWAY_TIMEOUT, "OPERATION_CANCELLED"),
}


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: ErrorDetails | None = None,
) -> JSONResponse:
    """Build an ErrorResponse-shaped JSON response.

    Args:
        request: Request being answered, for its correlation ID.
        status_code: HTTP status code.
        error_code: Machine-readable error code.
        message: Human-readable message.
        details: Field-level details.

    Returns:
        JSON response.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


def domain_error_status(exc: DomainError) -> tuple[int, str]:
    """Map a domain error to (status code, error code).

    Storage failures are server errors unless the store rejected the
    data itself, which is the client's fault.
    """
    if isinstance(exc, PersistenceError):
        if exc.constraint_violation:
            return status.HTTP_400_BAD_REQUEST, "PERSISTENCE_ERROR"
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "PERSISTENCE_ERROR"
    for error_type, mapping in DOMAIN_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return mapping
    return status.HTTP_400_BAD_REQUEST, "DOMAIN_ERROR"


def domain_error_details(exc: DomainError) -> ErrorDetails:
    """Field-level details for errors that name a field."""
    if isinstance(exc, ProductValidationError):
        return [{"field": e["field"], "message": e["message"]} for e in exc.errors]
    if isinstance(exc, InvalidFilterError):
        return [{"field": exc.parameter, "message": exc.details["reason"]}]
    return []


def is_malformed_body(errors: Sequence[Any]) -> bool:
    """Whether request errors show an unparseable or non-object body."""
    for e in errors:
        if e["type"] == "json_invalid":
            return True
        if tuple(e["loc"]) == ("body",) and e["type"] in MALFORMED_BODY_ERRORS:
            return True
    return False


# ============================================================================
# Exception Handlers
# ============================================================================


async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate domain errors into HTTP responses."""
    status_code, error_code = domain_error_status(exc)
    return error_response(
        request, status_code, error_code, exc.message, domain_error_details(exc)
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request parsing failures in the standard error format.

    A body that is not a JSON object is malformed input (400); a request
    that parses but breaks a field rule is a validation error (422).
    """
    errors = exc.errors()
    details = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
        }
        for e in errors
    ]
    if is_malformed_body(errors):
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "MALFORMED_INPUT",
            "Request body is not a valid JSON object",
            details,
        )
    return error_response(
        request,
        HTTP_422_UNPROCESSABLE,
        "VALIDATION_ERROR",
        "Request is invalid",
        details,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions, including unknown routes, with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
    else:
        error_code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "ERROR"
        message = str(detail)

    return error_response(request, exc.status_code, error_code, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the catalog's exception handlers on an application.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
