"""
Unit tests for URL helpers.
"""
import pytest

from agent_dashboard_service.utils import get_domain_from_url


@pytest.mark.parametrize(
    "url, domain",
    [
        ("https://mcp.example.com/sse", "mcp.example.com"),
        ("http://localhost:8931/mcp", "localhost"),
        ("https://user:pw@api.example.com:8443/x?y=1", "api.example.com"),
        ("mcp.example.com/path", "mcp.example.com"),
        ("custom://", ""),
    ],
)
def test_get_domain_from_url(url, domain):
    assert get_domain_from_url(url) == domain


def test_unparseable_url_falls_back_to_prefix_stripping():
    # An unterminated IPv6 literal makes urlparse raise
    assert get_domain_from_url("http://[::1/path") == "[::1"
