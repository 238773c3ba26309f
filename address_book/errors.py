"""Error taxonomy and JSON error responses.

Leaf components raise their own narrow exceptions (:class:`HashingError`,
:class:`InvalidToken`, :class:`GeocodingError`); route handlers translate
those into :class:`ServiceError` subclasses, each carrying the HTTP status
and the human-readable message returned to the client as ``{"message": ...}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class HashingError(Exception):
    """Password hashing or verification failed internally."""


class InvalidToken(Exception):
    """Session token is malformed, tampered with or expired."""


class GeocodingError(Exception):
    """The geocoding service could not be reached or answered garbage."""


class ServiceError(Exception):
    """Base class for failures reported to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    """400 - malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateEmail(ServiceError):
    """400 - registration with an email that is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already exists"


class AuthFailure(ServiceError):
    """Authentication failed; the subclass decides the status code."""


class InvalidCredentials(AuthFailure):
    """400 - bad login attempt."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class Forbidden(AuthFailure):
    """403 - missing, invalid or expired session."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authenticated"


class NotFound(ServiceError):
    """404 - resource is absent or owned by someone else."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalFault(ServiceError):
    """500 - failure not attributable to the caller."""


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors()[:3]:
        loc = [str(p) for p in error.get("loc", ()) if p != "body"]
        field = ".".join(loc)
        parts.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return "; ".join(parts) or "Invalid request"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _describe_validation_error(exc)},
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    fault = InternalFault("Storage failure")
    return JSONResponse(status_code=fault.status_code, content={"message": fault.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON ``{"message": ...}`` error handlers on ``app``."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
