"""
Application error taxonomy and the FastAPI handlers that render it.

Services raise the exceptions defined here; ``register_exception_handlers``
turns them into JSON responses of the form ``{"message": ...}``.  Request
validation failures are reshaped into a 400 with field level messages.
Database and otherwise unexpected failures become a generic 500 and are
logged with their traceback; internals are never sent to the client.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(AppError):
    """Malformed input.  ``errors`` holds ``{"field", "message"}`` entries."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, "authenticated": False}


class NotFoundError(AppError):
    """Resource absent or owned by somebody else."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class SessionError(AppError):
    """The session store failed to regenerate, save or destroy a session."""

    message = "Session error"


class UnknownError(AppError):
    pass


def _field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query" location prefix so clients see field names.
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(errors=_field_errors(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def database_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    error = UnknownError()
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    error = UnknownError()
    return JSONResponse(status_code=error.status_code, content=error.to_body())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers above to ``app``."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(sqlite3.Error, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
