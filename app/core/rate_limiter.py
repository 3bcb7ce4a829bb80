"""
Rate limiting for the HR core API.
Uses SlowAPI; limits are shared across instances when REDIS_URL is configured.

Limits are keyed on the connecting peer address. Behind a reverse proxy the
real client address is restored by uvicorn's proxy headers handling, which
only trusts X-Forwarded-For from FORWARDED_ALLOW_IPS; the raw headers are
never read here, so a client cannot pick its own bucket.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger("hrcore.rate_limiter")


if settings.REDIS_URL:
    # Mask credentials in logs
    logged_url = settings.REDIS_URL.split("@")[-1]
    logger.info(f"Rate limiter using Redis backend: {logged_url}")
elif settings.IS_PRODUCTION:
    logger.warning(
        "PRODUCTION WARNING: Rate limiting is using in-memory storage. "
        "Limits won't sync across instances. Configure REDIS_URL for distributed rate limiting."
    )


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.REDIS_URL,
    strategy="fixed-window",
    headers_enabled=True,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a rate limit rejection in the API error envelope."""
    logger.warning(
        f"Rate limit exceeded for {get_remote_address(request)} "
        f"on {request.method} {request.url.path}"
    )
    retry_after = getattr(exc, "retry_after", 60)

    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded"},
        headers={"Retry-After": str(retry_after)},
    )
