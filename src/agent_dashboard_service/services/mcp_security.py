"""
Guards applied before the service talks to an MCP server.

URLs are restricted to HTTP(S), client settings are clamped to safe ranges
and error messages are reduced to generic text in production so that
internal hostnames or stack details never reach API clients.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional
from urllib.parse import urlparse

from ..config import settings

MCP_SECURITY_CONFIG = {
    # Milliseconds
    "REQUEST_TIMEOUT": settings.MCP_REQUEST_TIMEOUT,
    "MAX_CONCURRENT_CONNECTIONS": settings.MCP_MAX_CONNECTIONS,
}

ALLOWED_PROTOCOLS = ("http", "https")
MAX_CLIENT_ID_LENGTH = 100
MAX_TIMEOUT_MS = 300000
DEFAULT_MAX_RETRIES = 3
MAX_RETRIES_LIMIT = 10


class McpSecurityError(ValueError):
    """Raised when an MCP URL or client configuration is rejected."""


@dataclass
class McpClientConfig:
    id: str
    timeout: int
    max_retries: int = DEFAULT_MAX_RETRIES


@dataclass
class ClientConfigValidation:
    is_valid: bool
    sanitized_config: McpClientConfig
    errors: List[str] = field(default_factory=list)


def validate_mcp_url(url: str) -> str:
    """
    Check that ``url`` is an absolute HTTP(S) URL.

    Returns:
        The stripped URL

    Raises:
        McpSecurityError: For unparseable URLs or other protocols
    """
    candidate = (url or "").strip()
    try:
        parsed = urlparse(candidate)
        # Accessing port validates it
        parsed.port
    except ValueError:
        raise McpSecurityError("Invalid URL format")

    if not parsed.scheme:
        raise McpSecurityError("Invalid URL format")
    if parsed.scheme.lower() not in ALLOWED_PROTOCOLS:
        raise McpSecurityError("Only HTTP and HTTPS protocols are allowed")
    if not parsed.netloc:
        raise McpSecurityError("Invalid URL format")
    return candidate


def sanitize_error_message(
    error: BaseException, is_production: Optional[bool] = None
) -> str:
    """
    Message of ``error`` that is safe to return to clients.

    Outside production the original message is returned unchanged.
    """
    if is_production is None:
        is_production = settings.is_production()

    if not is_production:
        return str(error) or "Unknown error occurred"

    message = str(error).lower()
    if "network" in message or "fetch" in message:
        return "Network connection failed"
    if "timeout" in message or "timed out" in message:
        return "Request timed out"
    if "not found" in message or "404" in message:
        return "MCP server not found"
    if "unauthorized" in message or "403" in message:
        return "Access denied"
    return "MCP operation failed"


def validate_mcp_client_config(config: McpClientConfig) -> ClientConfigValidation:
    """
    Validate an MCP client configuration, clamping out-of-range values.

    The sanitized copy is always usable even when errors are reported.
    """
    errors: List[str] = []
    sanitized = replace(config)

    if not config.id:
        errors.append("Client ID must be a non-empty string")
    elif len(config.id) > MAX_CLIENT_ID_LENGTH:
        errors.append(
            f"Client ID is too long (maximum {MAX_CLIENT_ID_LENGTH} characters)"
        )
        sanitized.id = config.id[:MAX_CLIENT_ID_LENGTH]

    if config.timeout <= 0:
        errors.append("Timeout must be a positive number")
        sanitized.timeout = MCP_SECURITY_CONFIG["REQUEST_TIMEOUT"]
    elif config.timeout > MAX_TIMEOUT_MS:
        errors.append("Timeout is too long (maximum 5 minutes)")
        sanitized.timeout = MAX_TIMEOUT_MS

    if config.max_retries < 0:
        errors.append("Max retries must be a non-negative number")
        sanitized.max_retries = DEFAULT_MAX_RETRIES
    elif config.max_retries > MAX_RETRIES_LIMIT:
        errors.append(f"Max retries is too high (maximum {MAX_RETRIES_LIMIT})")
        sanitized.max_retries = MAX_RETRIES_LIMIT

    return ClientConfigValidation(
        is_valid=not errors, sanitized_config=sanitized, errors=errors
    )
