import sys
import uuid

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from agent_dashboard_service.config import settings

from .logging_config import logger

# Write endpoints
API_LIMIT = settings.API_RATE_LIMIT
# Default for everything else
READONLY_LIMIT = settings.READONLY_RATE_LIMIT
# Calls that reach out to MCP servers
INTENSIVE_LIMIT = settings.INTENSIVE_RATE_LIMIT

# Determine if we're in test mode by checking if pytest is running
IS_TEST_MODE = "pytest" in sys.modules


def get_limiter_key(request: Request) -> str:
    if IS_TEST_MODE:
        # A unique key per request means no limit is ever reached
        return str(uuid.uuid4())
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_limiter_key,
    default_limits=[READONLY_LIMIT],
    strategy="fixed-window",
)

if IS_TEST_MODE:

    def noop_limit(limit_string, key_func=None):
        def decorator(func):
            # Marked so tests can check the decorator was applied
            func.__slowapi_decorated__ = True
            return func

        return decorator

    limiter.limit = noop_limit


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Return the API error shape with the limit that was hit."""
    logger.warning(
        f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}: {exc.detail}"
    )
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests", "retryAfter": exc.detail},
    )


def setup_rate_limiting(app):
    """Configure rate limiting for the FastAPI application"""
    app.state.limiter = limiter

    if IS_TEST_MODE:
        logger.info("Rate limiting is disabled in test mode")
    else:
        logger.info(
            f"Rate limiting is enabled with the following limits: "
            f"api={API_LIMIT}, readonly={READONLY_LIMIT}, intensive={INTENSIVE_LIMIT}"
        )

    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
