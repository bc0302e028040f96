"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render a rate limit hit in the standard error shape."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return ORJSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Too many requests: {detail}",
            "details": {"limit": str(detail)},
        },
    )
