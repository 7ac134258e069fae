"""
Rate limiting with slowapi.

Callers are keyed by the user id that get_current_user leaves on
request.state, falling back to the client IP. Login and registration
carry their own stricter limits; AI-backed generation uses
RATE_LIMIT_PER_MINUTE per user.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from pathforge.core.config import settings
from pathforge.core.logging_config import logger


USER_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"


def get_user_identifier(request: Request) -> str:
    """Rate limit key: user id when known, otherwise client IP"""
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED and not settings.TESTING,
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return a JSON 429 with a Retry-After hint"""
    logger.warning(f"[RateLimit] Exceeded for {get_user_identifier(request)}: {exc.detail}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "detail": "Too many requests. Please slow down.",
            "limit": str(exc.detail),
        },
        headers={"Retry-After": "60"}
    )
