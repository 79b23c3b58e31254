"""
Unit tests for the rate limiting setup.
"""
import pytest
from starlette.requests import Request

from agent_dashboard_service.rate_limiting import (
    IS_TEST_MODE,
    get_limiter_key,
    rate_limit_exceeded_handler,
)
from agent_dashboard_service.routers import agent_routes, mcp_routes


def make_request(path="/api/models"):
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": path,
            "headers": [],
            "client": ("10.0.0.1", 1234),
            "query_string": b"",
        }
    )


def test_test_mode_detected():
    assert IS_TEST_MODE is True


def test_keys_are_unique_in_test_mode():
    request = make_request()
    assert get_limiter_key(request) != get_limiter_key(request)


def test_write_endpoints_are_limited():
    assert agent_routes.create_agent.__slowapi_decorated__ is True
    assert mcp_routes.get_mcp_tools.__slowapi_decorated__ is True
    assert not hasattr(agent_routes.list_agents, "__slowapi_decorated__")


class _LimitExceeded(Exception):
    detail = "10 per 1 hour"


@pytest.mark.asyncio
async def test_exceeded_handler_body():
    response = await rate_limit_exceeded_handler(make_request(), _LimitExceeded())
    assert response.status_code == 429
    assert response.body == b'{"error":"Too many requests","retryAfter":"10 per 1 hour"}'
