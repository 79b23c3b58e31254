"""
Unit tests for the MCP connection pool, driven by an in-memory MCP transport.
"""
import httpx
import pytest
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData

from agent_dashboard_service.services.mcp_service import (
    McpServerConfig,
    McpService,
    McpServiceError,
)
from tests.fixtures.mcp_transport import TOOLS, FakeMcpTransport, tool_dict

SERVER = McpServerConfig(id="mcp-1", name="local-mcp", url="http://mcp.test/mcp")


def make_service(transport=None, **kwargs) -> McpService:
    return McpService(transport=transport or FakeMcpTransport(), **kwargs)


class TestToolDiscovery:
    @pytest.mark.asyncio
    async def test_lists_tools(self):
        transport = FakeMcpTransport()
        service = make_service(transport, request_timeout=5000, client_id_prefix="dashboard")

        tools = await service.get_tools(SERVER)

        assert tools == [tool_dict(tool) for tool in TOOLS]
        assert tools[1]["description"] is None
        assert transport.sessions == [("http://mcp.test/mcp", 5.0, "dashboard-mcp-1")]
        await service.disconnect_all()

    @pytest.mark.asyncio
    async def test_follows_pagination(self):
        transport = FakeMcpTransport(pages=[[TOOLS[0]], [TOOLS[1]]])
        service = make_service(transport)

        tools = await service.get_tools(SERVER)

        assert [tool["name"] for tool in tools] == ["search", "fetch"]
        assert transport.cursors == [None, "1"]
        assert len(transport.sessions) == 1
        await service.disconnect_all()

    @pytest.mark.asyncio
    async def test_protocol_error(self):
        transport = FakeMcpTransport()
        transport.error = McpError(ErrorData(code=-32603, message="boom"))
        service = make_service(transport)

        with pytest.raises(McpError, match="boom"):
            await service.get_tools(SERVER)
        assert len(transport.sessions) == 1

    @pytest.mark.asyncio
    async def test_exception_groups_are_unwrapped(self):
        transport = FakeMcpTransport()
        transport.error = ExceptionGroup(
            "unhandled errors in a TaskGroup", [httpx.ReadTimeout("timed out")]
        )
        service = make_service(transport)

        with pytest.raises(httpx.ReadTimeout):
            await service.get_tools(SERVER)

    @pytest.mark.asyncio
    async def test_connect_errors_are_retried(self):
        transport = FakeMcpTransport()
        transport.error = httpx.ConnectError("[Errno 111] Connection refused")
        service = make_service(transport)

        with pytest.raises(httpx.ConnectError):
            await service.get_tools(SERVER)
        # One attempt plus three retries
        assert len(transport.sessions) == 4

    @pytest.mark.asyncio
    async def test_recovers_when_a_retry_connects(self):
        transport = FakeMcpTransport()
        transport.failures = [httpx.ConnectError("[Errno 111] Connection refused")]
        service = make_service(transport)

        tools = await service.get_tools(SERVER)

        assert len(tools) == 2
        assert len(transport.sessions) == 2
        await service.disconnect_all()


class TestPooling:
    @pytest.mark.asyncio
    async def test_reuses_healthy_client(self):
        transport = FakeMcpTransport()
        service = make_service(transport)

        await service.get_tools(SERVER)
        await service.get_tools(SERVER)

        assert transport.list_calls == 2
        assert service.get_active_connections() == ["mcp-1"]
        assert service.get_metrics()["total_connections"] == 1
        await service.disconnect_all()

    @pytest.mark.asyncio
    async def test_failed_call_marks_connection_unhealthy(self):
        transport = FakeMcpTransport()
        transport.error = httpx.RemoteProtocolError("Server disconnected")
        service = make_service(transport)

        with pytest.raises(httpx.RemoteProtocolError):
            await service.get_tools(SERVER)

        health = service.get_health_status("mcp-1")
        assert health["is_healthy"] is False
        assert health["consecutive_failures"] == 1
        assert service.get_metrics()["failed_connections"] == 1

        transport.error = None
        tools = await service.get_tools(SERVER)

        assert len(tools) == 2
        assert service.get_health_status("mcp-1")["consecutive_failures"] == 0
        # The unhealthy client was replaced
        assert service.get_metrics()["total_connections"] == 2
        await service.disconnect_all()

    @pytest.mark.asyncio
    async def test_connection_cap(self):
        service = make_service(max_connections=1)
        await service.get_tools(SERVER)

        other = McpServerConfig(id="mcp-2", name="other", url="http://other.test/mcp")
        with pytest.raises(McpServiceError, match="Maximum concurrent MCP connections reached"):
            await service.get_tools(other)
        await service.disconnect_all()

    @pytest.mark.asyncio
    async def test_cap_frees_unhealthy_connections(self):
        service = make_service(max_connections=1)
        await service.get_tools(SERVER)
        service._health["mcp-1"].is_healthy = False

        other = McpServerConfig(id="mcp-2", name="other", url="http://other.test/mcp")
        await service.get_tools(other)

        assert service.get_active_connections() == ["mcp-2"]
        await service.disconnect_all()

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        transport = FakeMcpTransport()
        service = make_service(transport)
        bad = McpServerConfig(id="mcp-3", name="bad", url="ftp://files.test")

        with pytest.raises(McpServiceError, match="Only HTTP and HTTPS protocols are allowed"):
            await service.get_tools(bad)
        assert service.get_active_connections() == []
        assert transport.sessions == []

    @pytest.mark.asyncio
    async def test_client_id_too_long(self):
        service = make_service(client_id_prefix="x" * 120)
        with pytest.raises(McpServiceError, match="Invalid client config"):
            await service.get_tools(SERVER)

    @pytest.mark.asyncio
    async def test_force_reconnect_and_disconnect_all(self):
        service = make_service()
        await service.get_tools(SERVER)
        await service.get_tools(McpServerConfig(id="mcp-2", name="b", url="http://b.test"))

        await service.force_reconnect("mcp-1")
        assert service.get_active_connections() == ["mcp-2"]
        assert service.get_health_status("mcp-1") is None

        await service.disconnect_all()
        assert service.get_active_connections() == []
        assert service.get_health_status() == {}
        assert service.get_metrics()["active_connections"] == 0

    @pytest.mark.asyncio
    async def test_health_checks_start_and_stop(self):
        service = make_service()
        service.start_health_checks()
        task = service._health_task
        assert task is not None and not task.done()

        await service.shutdown()
        assert task.cancelled()
        assert service._health_task is None


def test_default_transport_is_streamable_http():
    from agent_dashboard_service.services.mcp_transport import StreamableHttpMcpTransport

    assert isinstance(McpService().transport, StreamableHttpMcpTransport)
