"""
Logging configuration for the Agent Dashboard Service.

Provides the shared ``logger``, ``setup_logging`` for console output with
per-module levels, and the request logging middleware used by ``main``.
"""

import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .config import settings

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "line": %(lineno)d, "message": "%(message)s"}'
)

# Third-party loggers are noisy at INFO
MODULE_LOG_LEVELS = {
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "WARNING",
}

logger = logging.getLogger(settings.SERVICE_NAME)


def _format_for(name: str) -> str:
    if name == "json":
        return JSON_FORMAT
    if name == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    log_level: Optional[str] = None, log_format: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override the configured level (DEBUG, INFO, WARNING, ...)
        log_format: Override the configured format (simple, detailed, json)
    """
    level = (log_level or settings.LOGGING_LEVEL).upper()
    fmt = log_format or settings.LOG_FORMAT

    formatter = logging.Formatter(_format_for(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates on reload
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    logger.setLevel(level)
    logger.debug(f"Logging configured: level={level}, format={fmt}")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every /api/ request with its status and duration.

    Each request gets an id, echoed back in the X-Request-ID header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith("/api/"):
            return await call_next(request)

        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        logger.info(
            f"API Request: {request.method} {request.url.path} "
            f"[request_id={request_id}]"
        )
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"API Request failed: {request.method} {request.url.path} "
                f"after {duration_ms:.1f}ms [request_id={request_id}]",
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f"API Response: {request.method} {request.url.path} "
            f"{response.status_code} in {duration_ms:.1f}ms [request_id={request_id}]"
        )
        response.headers["X-Request-ID"] = request_id
        return response


def setup_middleware(app: FastAPI) -> None:
    """Attach the request logging middleware to the application."""
    app.add_middleware(LoggingMiddleware)
