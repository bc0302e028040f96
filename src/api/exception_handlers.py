"""Exception handlers for the FastAPI application."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()


def _error_response(
    status_code: int, error_code: str, message: Any, details: Any | None = None
) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
        """Handle custom application exceptions."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
            status_code=exc.status_code,
        )
        return _error_response(exc.status_code, exc.error_code.value, exc.message, exc.details)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request, exc: SQLAlchemyError
    ) -> ORJSONResponse:
        """Database failures outside the delivery path (inbox reads, mark-read)."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "database_error",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
        )
        return _error_response(
            503,
            ErrorCode.DATABASE_ERROR.value,
            "Notification storage is temporarily unavailable",
            {"request_id": request_id},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions from FastAPI/Starlette."""
        return _error_response(exc.status_code, "HTTP_ERROR", exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle Pydantic validation errors."""
        logger.info("validation_error", error_count=len(exc.errors()))
        return _error_response(
            422,
            ErrorCode.VALIDATION_ERROR.value,
            "Request validation failed",
            [
                {
                    "field": ".".join(str(x) for x in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in exc.errors()
            ],
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )

        message = "An unexpected error occurred"
        if not settings.is_production:
            message = str(exc)

        return _error_response(
            500, ErrorCode.INTERNAL_ERROR.value, message, {"request_id": request_id}
        )
