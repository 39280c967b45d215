"""
Application error taxonomy and global exception handlers.

Every error leaving the API has the body ``{"error": str, "message": str}``;
stack traces are logged, never returned.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error


class ValidationError(AppError):
    status_code = 400
    error = "Invalid request data"


class AuthenticationError(AppError):
    status_code = 401
    error = "Authentication required"


class AuthorizationError(AppError):
    status_code = 403
    error = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = 404
    error = "Not Found"


class ConflictError(AppError):
    status_code = 409
    error = "Conflict"


class InternalError(AppError):
    status_code = 500
    error = "Internal server error"


def error_body(error: str, message: str) -> dict[str, str]:
    return {"error": error, "message": message}


async def _app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error, exc.message, exc_info=exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.message),
        headers=headers,
    )


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid request data", "; ".join(details) or "Malformed request"),
    )


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "The requested resource was not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(_reason(exc.status_code), message),
        headers=getattr(exc, "headers", None),
    )


async def _rate_limit_handler(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content=error_body("Too many requests", f"Rate limit exceeded: {exc.detail}"),
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content=error_body("Conflict", "Database constraint violation"),
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "Internal database error"),
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "An unexpected error occurred"),
    )


_REASONS = {
    400: "Bad Request",
    401: "Authentication required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
}


def _reason(status_code: int) -> str:
    return _REASONS.get(status_code, "Internal server error" if status_code >= 500 else "Error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
