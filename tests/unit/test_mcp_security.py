"""
Unit tests for MCP URL, configuration and error message guards.
"""
import pytest

from agent_dashboard_service.services.mcp_security import (
    McpClientConfig,
    McpSecurityError,
    sanitize_error_message,
    validate_mcp_client_config,
    validate_mcp_url,
)


class TestValidateMcpUrl:
    @pytest.mark.parametrize(
        "url", ["http://localhost:8931/mcp", "https://mcp.example.com", "  https://a.io/x  "]
    )
    def test_accepts_http_and_https(self, url):
        assert validate_mcp_url(url) == url.strip()

    @pytest.mark.parametrize("url", ["ftp://files.example.com", "file:///etc/passwd", "javascript:alert(1)"])
    def test_rejects_other_protocols(self, url):
        with pytest.raises(McpSecurityError, match="Only HTTP and HTTPS protocols are allowed"):
            validate_mcp_url(url)

    @pytest.mark.parametrize("url", ["", "mcp.example.com", "http://", "http://[::1", "http://host:port"])
    def test_rejects_malformed_urls(self, url):
        with pytest.raises(McpSecurityError, match="Invalid URL format"):
            validate_mcp_url(url)


class TestSanitizeErrorMessage:
    def test_passes_message_through_outside_production(self):
        error = RuntimeError("connect to 10.0.0.5 failed")
        assert sanitize_error_message(error, is_production=False) == "connect to 10.0.0.5 failed"

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Network is unreachable", "Network connection failed"),
            ("fetch failed", "Network connection failed"),
            ("read timeout", "Request timed out"),
            ("404 Not Found for url http://x", "MCP server not found"),
            ("Unauthorized", "Access denied"),
            ("HTTP 403", "Access denied"),
            ("something odd", "MCP operation failed"),
        ],
    )
    def test_maps_messages_in_production(self, message, expected):
        assert sanitize_error_message(Exception(message), is_production=True) == expected


class TestValidateMcpClientConfig:
    def test_valid_config(self):
        result = validate_mcp_client_config(McpClientConfig(id="dash-1", timeout=30000))
        assert result.is_valid
        assert result.errors == []
        assert result.sanitized_config.max_retries == 3

    def test_long_id_is_truncated(self):
        result = validate_mcp_client_config(McpClientConfig(id="x" * 150, timeout=1000))
        assert not result.is_valid
        assert len(result.sanitized_config.id) == 100
        assert result.errors == ["Client ID is too long (maximum 100 characters)"]

    def test_timeout_bounds(self):
        too_long = validate_mcp_client_config(McpClientConfig(id="a", timeout=300001))
        assert too_long.sanitized_config.timeout == 300000
        assert "Timeout is too long (maximum 5 minutes)" in too_long.errors

        negative = validate_mcp_client_config(McpClientConfig(id="a", timeout=0))
        assert "Timeout must be a positive number" in negative.errors
        assert negative.sanitized_config.timeout > 0

    def test_retry_bounds(self):
        too_many = validate_mcp_client_config(McpClientConfig(id="a", timeout=1, max_retries=11))
        assert too_many.sanitized_config.max_retries == 10

        negative = validate_mcp_client_config(McpClientConfig(id="a", timeout=1, max_retries=-1))
        assert negative.sanitized_config.max_retries == 3
        assert "Max retries must be a non-negative number" in negative.errors

    def test_original_config_is_not_modified(self):
        config = McpClientConfig(id="x" * 150, timeout=0)
        validate_mcp_client_config(config)
        assert len(config.id) == 150
        assert config.timeout == 0
