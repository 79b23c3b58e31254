"""
Pooled MCP clients with health tracking.

``McpService`` keeps one ``McpClient`` per registered MCP server, reuses it
while the server keeps answering and drops it after repeated failures or
inactivity. Tool discovery goes through the ``mcp`` SDK: a ``ClientSession``
over the streamable HTTP transport runs the ``initialize`` handshake and
paginated ``tools/list`` calls.
"""

import asyncio
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..logging_config import logger
from .mcp_security import (
    MCP_SECURITY_CONFIG,
    McpClientConfig,
    McpSecurityError,
    validate_mcp_client_config,
    validate_mcp_url,
)
from .mcp_transport import McpTransport, StreamableHttpMcpTransport


class McpServiceError(Exception):
    """Raised for MCP failures that are not transport errors."""


@dataclass
class McpServerConfig:
    id: str
    name: str
    url: str


@dataclass
class ConnectionHealth:
    is_healthy: bool = True
    last_check: float = 0.0
    consecutive_failures: int = 0
    # Milliseconds
    response_time: float = 0.0


@dataclass
class ConnectionMetrics:
    total_connections: int = 0
    active_connections: int = 0
    failed_connections: int = 0
    avg_response_time: float = 0.0
    last_updated: float = field(default_factory=time.time)


def _leaf_error(error: BaseException) -> BaseException:
    # anyio task groups inside the SDK wrap failures in exception groups
    while isinstance(error, BaseExceptionGroup) and error.exceptions:
        error = error.exceptions[0]
    return error


class McpClient:
    """
    Tool discovery against one MCP server.

    Each call opens its own SDK session through the transport, so no
    stream outlives the request that used it.
    """

    def __init__(self, config: McpClientConfig, url: str, transport: McpTransport):
        self.config = config
        self.url = url
        self.transport = transport
        self.timeout = config.timeout / 1000

    async def list_tools(self) -> List[Dict[str, Any]]:
        """List every tool the server advertises, following pagination cursors."""
        attempt = 0
        while True:
            try:
                return await self._list_tools_once()
            except Exception as e:
                error = _leaf_error(e)
                if not isinstance(error, httpx.ConnectError) or attempt >= self.config.max_retries:
                    if error is e:
                        raise
                    raise error from e
                attempt += 1
                logger.debug(
                    f"Retrying MCP connection to {self.url} "
                    f"({attempt}/{self.config.max_retries}): {error}"
                )

    async def _list_tools_once(self) -> List[Dict[str, Any]]:
        tools: List[Dict[str, Any]] = []
        async with self.transport.session(self.url, self.timeout, self.config.id) as session:
            cursor: Optional[str] = None
            while True:
                result = await session.list_tools(cursor=cursor)
                for tool in result.tools:
                    tools.append(
                        {
                            "id": tool.name,
                            "name": tool.name,
                            "description": tool.description,
                            "schema": tool.inputSchema,
                        }
                    )
                cursor = result.nextCursor
                if not cursor:
                    return tools

    async def aclose(self) -> None:
        # Sessions are scoped to each call; nothing is held open between them
        return None


class McpService:
    """
    Connection pool and health tracker for MCP servers.

    Args:
        max_connections: Maximum number of pooled clients
        request_timeout: Request timeout in milliseconds
        client_id_prefix: Prefix of the client id sent to servers
        transport: MCP session transport, the SDK streamable HTTP client by default
    """

    max_consecutive_failures = 3
    health_check_interval = 30.0

    def __init__(
        self,
        max_connections: Optional[int] = None,
        request_timeout: Optional[int] = None,
        client_id_prefix: Optional[str] = None,
        transport: Optional[McpTransport] = None,
    ):
        self.max_connections = (
            max_connections or MCP_SECURITY_CONFIG["MAX_CONCURRENT_CONNECTIONS"]
        )
        self.request_timeout = request_timeout or MCP_SECURITY_CONFIG["REQUEST_TIMEOUT"]
        self.client_id_prefix = client_id_prefix or settings.MCP_CLIENT_ID
        self.transport = transport or StreamableHttpMcpTransport()
        self._clients: Dict[str, McpClient] = {}
        self._health: Dict[str, ConnectionHealth] = {}
        self._metrics = ConnectionMetrics()
        self._health_task: Optional[asyncio.Task] = None

    def is_client_healthy(self, mcp_id: str) -> bool:
        health = self._health.get(mcp_id)
        if not health:
            return False
        return (
            health.is_healthy
            and health.consecutive_failures < self.max_consecutive_failures
            and time.time() - health.last_check < self.health_check_interval * 2
        )

    async def get_or_create_client(self, config: McpServerConfig) -> McpClient:
        """
        Return the pooled client for an MCP server, creating it when needed.

        Raises:
            McpServiceError: For an invalid URL or configuration, or when the
                pool is full
        """
        existing = self._clients.get(config.id)
        if existing and self.is_client_healthy(config.id):
            logger.debug(f"Reusing MCP client for {config.name} ({config.id})")
            return existing

        try:
            url = validate_mcp_url(config.url)
        except McpSecurityError as e:
            raise McpServiceError(f"Invalid MCP URL: {e}") from e

        if existing:
            await self.disconnect(config.id)

        if len(self._clients) >= self.max_connections:
            await self.cleanup_unhealthy_connections()
            if len(self._clients) >= self.max_connections:
                raise McpServiceError("Maximum concurrent MCP connections reached")

        validation = validate_mcp_client_config(
            McpClientConfig(
                id=f"{self.client_id_prefix}-{config.id}",
                timeout=self.request_timeout,
            )
        )
        if not validation.is_valid:
            self._update_metrics(failed_connections=self._metrics.failed_connections + 1)
            raise McpServiceError(f"Invalid client config: {', '.join(validation.errors)}")

        client = McpClient(validation.sanitized_config, url, transport=self.transport)
        self._clients[config.id] = client
        self._health[config.id] = ConnectionHealth(last_check=time.time())
        self._update_metrics(
            total_connections=self._metrics.total_connections + 1,
            active_connections=len(self._clients),
        )

        logger.info(
            f"Created MCP client for {config.name} ({config.id}), "
            f"{len(self._clients)} active"
        )
        return client

    async def get_tools(self, config: McpServerConfig) -> List[Dict[str, Any]]:
        """Fetch the tools advertised by an MCP server, recording health and timing."""
        start_time = time.perf_counter()
        try:
            client = await self.get_or_create_client(config)
            tools = await client.list_tools()
        except Exception as e:
            response_time = (time.perf_counter() - start_time) * 1000
            self._update_health_status(config.id, False, response_time)
            logger.error(
                f"Failed to fetch tools from MCP {config.name} ({config.id}) "
                f"after {response_time:.0f}ms: {e}"
            )
            raise

        response_time = (time.perf_counter() - start_time) * 1000
        self._update_health_status(config.id, True, response_time)
        logger.debug(
            f"Fetched {len(tools)} tools from MCP {config.name} in {response_time:.0f}ms"
        )
        return tools

    async def disconnect(self, mcp_id: str) -> None:
        client = self._clients.get(mcp_id)
        if not client:
            return
        try:
            await client.aclose()
            logger.debug(f"MCP client {mcp_id} disconnected")
        except Exception as e:
            logger.warning(f"Error disconnecting MCP client {mcp_id}: {e}")
        finally:
            self._clients.pop(mcp_id, None)
            self._health.pop(mcp_id, None)
            self._update_metrics(active_connections=len(self._clients))

    async def disconnect_all(self) -> None:
        logger.info(f"Disconnecting {len(self._clients)} MCP clients")
        await asyncio.gather(
            *(self.disconnect(mcp_id) for mcp_id in list(self._clients)),
            return_exceptions=True,
        )
        self._clients.clear()
        self._health.clear()
        self._update_metrics(active_connections=0)

    async def force_reconnect(self, mcp_id: str) -> None:
        """Drop the pooled client; the next call creates a fresh one."""
        logger.info(f"Forcing MCP reconnection for {mcp_id}")
        await self.disconnect(mcp_id)

    async def cleanup_unhealthy_connections(self) -> List[str]:
        unhealthy = [mcp_id for mcp_id in self._clients if not self.is_client_healthy(mcp_id)]
        if unhealthy:
            logger.info(f"Cleaning up {len(unhealthy)} unhealthy MCP connections: {unhealthy}")
            for mcp_id in unhealthy:
                await self.disconnect(mcp_id)
        return unhealthy

    def get_health_status(self, mcp_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Health of one connection, or of every connection keyed by MCP id."""
        if mcp_id is not None:
            health = self._health.get(mcp_id)
            return asdict(health) if health else None
        return {key: asdict(health) for key, health in self._health.items()}

    def get_metrics(self) -> Dict[str, Any]:
        return asdict(self._metrics)

    def get_active_connections(self) -> List[str]:
        return list(self._clients)

    def _update_health_status(self, mcp_id: str, is_healthy: bool, response_time: float) -> None:
        current = self._health.get(mcp_id) or ConnectionHealth()
        self._health[mcp_id] = ConnectionHealth(
            is_healthy=is_healthy,
            last_check=time.time(),
            consecutive_failures=0 if is_healthy else current.consecutive_failures + 1,
            response_time=response_time,
        )
        if not is_healthy:
            self._update_metrics(failed_connections=self._metrics.failed_connections + 1)

        total = self._metrics.total_connections
        self._update_metrics(
            avg_response_time=(self._metrics.avg_response_time * total + response_time)
            / (total + 1)
        )

    def _update_metrics(self, **updates) -> None:
        for key, value in updates.items():
            setattr(self._metrics, key, value)
        self._metrics.last_updated = time.time()

    async def _health_check_loop(self) -> None:
        while True:
            await asyncio.sleep(self.health_check_interval)
            try:
                await self.cleanup_unhealthy_connections()
            except Exception as e:
                logger.error(f"Error during MCP health check cleanup: {e}", exc_info=True)

    def start_health_checks(self) -> None:
        if self._health_task is None or self._health_task.done():
            self._health_task = asyncio.create_task(self._health_check_loop())
            logger.debug("Started MCP health check task")

    async def shutdown(self) -> None:
        """Stop the health check task and close every client."""
        logger.info("Shutting down MCP service")
        if self._health_task is not None:
            self._health_task.cancel()
            try:
                await self._health_task
            except asyncio.CancelledError:
                pass
            self._health_task = None
        await self.disconnect_all()


_mcp_service: Optional[McpService] = None


def get_mcp_service() -> McpService:
    """Returns the process-wide MCP service, creating it if it doesn't exist."""
    global _mcp_service
    if _mcp_service is None:
        _mcp_service = McpService()
    return _mcp_service
