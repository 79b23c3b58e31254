"""
Sessions to MCP servers over the streamable HTTP transport of the ``mcp`` SDK.
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator, Protocol

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client
from mcp.types import Implementation

from .. import __version__


class McpTransport(Protocol):
    """Opens initialized MCP client sessions.

    ``session(url, timeout, client_name)`` returns an async context manager
    yielding a ``ClientSession`` on which ``initialize()`` has completed.
    """

    def session(self, url: str, timeout: float, client_name: str):
        ...


class StreamableHttpMcpTransport:
    """MCP transport using the SDK's streamable HTTP client."""

    def session(self, url: str, timeout: float, client_name: str):
        @asynccontextmanager
        async def _cm() -> AsyncIterator[ClientSession]:
            async with streamablehttp_client(url, timeout=timeout) as (
                read_stream,
                write_stream,
                _get_session_id,
            ):
                async with ClientSession(
                    read_stream,
                    write_stream,
                    read_timeout_seconds=timedelta(seconds=timeout),
                    client_info=Implementation(name=client_name, version=__version__),
                ) as session:
                    await session.initialize()
                    yield session

        return _cm()
