import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.utils.response import error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class BadRequest(AppException):
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=400, details=details)


class Unauthorized(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=401)


class Conflict(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=409)


class StoreError(AppException):
    """The key-value store was unreachable or answered with an error."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=500, details=details)


class InternalError(AppException):
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=500, details=details)


class UpstreamError(AppException):
    """An upstream API answered with a non-2xx status; its status is passed through."""


class ConfigurationError(RuntimeError):
    pass


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, exc.details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Rejected malformed body on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=400,
            content=error_response("Invalid request body."),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("An internal server error occurred."),
        )
