"""HTTP middleware for response hardening and request size limits."""

from typing import Any, Callable, Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from .config import settings
from .logging_config import logger

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'self'",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the standard security headers to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects request bodies larger than the configured limit.

    A declared Content-Length is checked before reading anything. The body
    itself is then measured, which catches chunked uploads and understated
    headers. Starlette caches the body, so route handlers still read it.
    """

    def __init__(self, app: Callable[..., Any], max_body_size: Optional[int] = None):
        super().__init__(app)
        self._max_body_size = max_body_size or settings.MAX_REQUEST_BODY_SIZE

    def _too_large(self, request: Request, size: int) -> JSONResponse:
        logger.warning(
            f"Request body too large: {size} bytes > {self._max_body_size} "
            f"bytes (path: {request.url.path})"
        )
        return JSONResponse(status_code=413, content={"error": "Request too large"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method in ("GET", "HEAD", "OPTIONS", "DELETE"):
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                size = 0
            if size > self._max_body_size:
                return self._too_large(request, size)

        body = await request.body()
        if len(body) > self._max_body_size:
            return self._too_large(request, len(body))

        return await call_next(request)
