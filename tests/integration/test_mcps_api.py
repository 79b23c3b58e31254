"""
Integration tests for the /api/mcps endpoints.

MCP sessions come from the ``mcp_transport`` fake; tests script failures
by setting its ``error``.
"""
import uuid

import httpx
import pytest
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData

from tests.fixtures.helpers import create_test_mcp


@pytest.mark.asyncio
async def test_mcp_crud_flow(client):
    resp = await client.post(
        "/api/mcps", json={"name": "docs", "url": "https://docs.example.com:8443/mcp"}
    )
    assert resp.status_code == 201
    mcp = resp.json()
    assert mcp["domain"] == "docs.example.com"

    resp = await client.get("/api/mcps")
    assert [(m["id"], m["domain"]) for m in resp.json()] == [(mcp["id"], "docs.example.com")]

    resp = await client.put(
        f"/api/mcps/{mcp['id']}", json={"name": "docs", "url": "http://localhost:8931/mcp"}
    )
    assert resp.status_code == 200
    assert resp.json()["domain"] == "localhost"

    resp = await client.get(f"/api/mcps/{mcp['id']}")
    assert resp.json()["url"] == "http://localhost:8931/mcp"


@pytest.mark.asyncio
async def test_invalid_mcp_url(client):
    resp = await client.post("/api/mcps", json={"name": "docs", "url": "ftp://docs.example.com"})
    assert resp.status_code == 400
    assert resp.json()["details"][0]["message"] == "Please enter a valid URL"


@pytest.mark.asyncio
async def test_fetch_tools(client, db_session, mcp_transport):
    mcp = await create_test_mcp(db_session)

    resp = await client.get(f"/api/mcps/{mcp.id}/tools")
    assert resp.status_code == 200
    assert resp.headers["X-MCP-Service-Status"] == "healthy"
    tools = resp.json()["tools"]
    assert [tool["name"] for tool in tools] == ["search", "fetch"]
    assert tools[0]["schema"]["type"] == "object"
    assert mcp_transport.sessions[0][0] == mcp.url

    resp = await client.get("/api/mcps/tools", params={"id": str(mcp.id)})
    assert resp.status_code == 200
    assert len(resp.json()["tools"]) == 2


@pytest.mark.asyncio
async def test_fetch_tools_bad_ids(client):
    resp = await client.get("/api/mcps/tools")
    assert resp.status_code == 400
    assert resp.json() == {"error": "MCP ID is required"}

    resp = await client.get("/api/mcps/not-a-uuid/tools")
    assert resp.status_code == 404
    assert resp.json() == {"error": "MCP not found"}

    resp = await client.get(f"/api/mcps/{uuid.uuid4()}/tools")
    assert resp.status_code == 404
    assert resp.json() == {"error": "MCP not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, status_code, message",
    [
        (
            httpx.ReadTimeout("timed out"),
            504,
            "Request timeout: MCP server did not respond",
        ),
        (
            McpError(ErrorData(code=408, message="Timed out while waiting for response")),
            504,
            "Request timeout: MCP server did not respond",
        ),
        (
            httpx.ConnectError("[Errno -2] Name or service not known"),
            502,
            "DNS error: MCP server not found",
        ),
        (
            httpx.ConnectError("[Errno 111] Connection refused"),
            502,
            "Connection refused: MCP server is not accessible",
        ),
        (
            httpx.RemoteProtocolError("Server disconnected"),
            502,
            "Network error: Unable to reach MCP server",
        ),
        (
            ExceptionGroup("unhandled errors in a TaskGroup", [httpx.RemoteProtocolError("Server disconnected")]),
            502,
            "Network error: Unable to reach MCP server",
        ),
    ],
)
async def test_fetch_tools_transport_errors(client, db_session, mcp_transport, error, status_code, message):
    mcp = await create_test_mcp(db_session)
    mcp_transport.error = error

    resp = await client.get(f"/api/mcps/{mcp.id}/tools")
    assert resp.status_code == status_code
    assert resp.json() == {"error": message}
    assert "X-MCP-Service-Status" not in resp.headers


@pytest.mark.asyncio
async def test_fetch_tools_server_error(client, db_session, mcp_transport):
    mcp = await create_test_mcp(db_session)
    request = httpx.Request("POST", mcp.url)
    mcp_transport.error = httpx.HTTPStatusError(
        "Client error '404 Not Found'", request=request, response=httpx.Response(404, request=request)
    )

    resp = await client.get(f"/api/mcps/{mcp.id}/tools")
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Failed to fetch tools: ")
