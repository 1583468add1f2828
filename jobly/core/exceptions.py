"""
Application error types and their translation to HTTP responses.

The CRUD layer raises these errors; the handlers registered here turn them
into a uniform JSON body: {"error": {"message": ..., "status": ...}}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class JoblyError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Any = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """400: malformed input or a request the data cannot satisfy."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: Any = "Bad Request"):
        super().__init__(message)


class UnauthorizedError(JoblyError):
    """401: missing or invalid credentials, or wrong identity/role."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: Any = "Unauthorized"):
        super().__init__(message)


class NotFoundError(JoblyError):
    """404: no row matches the identifier."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: Any = "Not Found"):
        super().__init__(message)


def error_response(message: Any, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Set up exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(JoblyError)
    async def jobly_error_handler(request: Request, exc: JoblyError):
        """Handle errors raised by the CRUD and auth layers."""
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            logger.warning(f"Unauthorized: {request.method} {request.url.path}")
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request shape errors as 400s."""
        messages = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
            messages.append(f"{field}: {error['msg']}" if field else error["msg"])
        return error_response(messages, status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle framework HTTP errors (unknown route, bad method)."""
        return error_response(exc.detail, exc.status_code)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle storage failures without leaking SQL details."""
        logger.error(
            f"Database error: {request.method} {request.url.path} - {type(exc).__name__}",
            exc_info=exc,
        )
        return error_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        logger.error(
            f"Unhandled exception: {request.method} {request.url.path} - {type(exc).__name__}",
            exc_info=exc,
        )
        return error_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)
