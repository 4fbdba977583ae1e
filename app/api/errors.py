"""Exception handlers that render every failure in the {message, errors?} envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    AuthError,
    InternalError,
    ServiceError,
    ValidationFailed,
)
from app.schemas.common import ApiResponse, FieldError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal error"


def _envelope(
    status_code: int,
    message: str,
    errors: list[FieldError] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ApiResponse(message=message, errors=errors or None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _render_validation(exc: ValidationFailed) -> JSONResponse:
    errors = [FieldError(**e) for e in exc.errors]
    return _envelope(exc.status_code, exc.message, errors=errors)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _render_validation(ValidationFailed.from_pydantic(exc.errors()))

    @app.exception_handler(ValidationFailed)
    async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
        return _render_validation(exc)

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        return _envelope(
            exc.status_code,
            exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(InternalError)
    async def internal_error_handler(request: Request, exc: InternalError) -> JSONResponse:
        logger.error(
            "Internal error on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.cause,
        )
        return _envelope(500, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("[ERR_UNHANDLED] %s %s", request.method, request.url.path)
        return _envelope(500, INTERNAL_ERROR_MESSAGE)
