import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..services.exceptions import (
    EmailDeliveryError,
    FileTooLargeError,
    RateLimitedError,
    ResumeValidationError,
)
from .config import settings as default_settings, Settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_body(message: str, settings: Settings, details=None) -> dict:
    body = {"success": False, "error": message}
    if settings.is_development and details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI, settings: Settings = default_settings) -> None:
    """Map domain errors to HTTP responses with an `{"error": ...}` body."""

    @app.exception_handler(ResumeValidationError)
    async def resume_validation_handler(request: Request, exc: ResumeValidationError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.message, settings),
        )

    @app.exception_handler(FileTooLargeError)
    async def file_too_large_handler(request: Request, exc: FileTooLargeError) -> JSONResponse:
        logger.warning(f"Upload rejected, {exc.size} bytes over limit {exc.max_bytes}")
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content=_error_body(exc.message, settings),
        )

    @app.exception_handler(RateLimitedError)
    async def rate_limited_handler(request: Request, exc: RateLimitedError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=_error_body(exc.message, settings),
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(EmailDeliveryError)
    async def email_delivery_handler(request: Request, exc: EmailDeliveryError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Failed to send email", settings, details=exc.original_error),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = "Invalid request data"
        if errors:
            message = f"Invalid request data: {errors[0].get('msg', '')}".rstrip(": ")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(message, settings, details=str(errors)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail), settings),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        message = str(exc) if settings.is_development else INTERNAL_ERROR_MESSAGE
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(message, settings, details=repr(exc)),
        )
