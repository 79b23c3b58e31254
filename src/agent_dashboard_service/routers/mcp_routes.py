import time
from typing import List, Optional
from uuid import UUID

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from mcp.shared.exceptions import McpError
from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.constants import MCP_ID_REQUIRED, MCP_NOT_FOUND
from agent_dashboard_service.crud import mcps as mcp_crud
from agent_dashboard_service.crud.common import not_found
from agent_dashboard_service.db import get_db
from agent_dashboard_service.logging_config import logger
from agent_dashboard_service.rate_limiting import API_LIMIT, INTENSIVE_LIMIT, limiter
from agent_dashboard_service.schemas.mcp import (
    McpCreate,
    McpToolsResponse,
    McpUpdate,
    McpWithDomain,
)
from agent_dashboard_service.services.mcp_security import sanitize_error_message
from agent_dashboard_service.services.mcp_service import (
    McpServerConfig,
    McpService,
    get_mcp_service,
)
from agent_dashboard_service.utils.helpers import parse_uuid

router = APIRouter()

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "name resolution",
    "no address associated",
)
_REFUSED_MARKERS = ("connection refused", "errno 111", "econnrefused")


def mcp_error_to_http(error: Exception) -> HTTPException:
    """Map a failure while talking to an MCP server to an API error."""
    message = str(error).lower()
    timed_out = isinstance(error, McpError) and error.error.code == httpx.codes.REQUEST_TIMEOUT
    if timed_out or isinstance(error, httpx.TimeoutException):
        return HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Request timeout: MCP server did not respond",
        )
    if isinstance(error, httpx.ConnectError):
        if any(marker in message for marker in _DNS_MARKERS):
            return HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="DNS error: MCP server not found",
            )
        if any(marker in message for marker in _REFUSED_MARKERS):
            return HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Connection refused: MCP server is not accessible",
            )
    if isinstance(error, httpx.TransportError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Network error: Unable to reach MCP server",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to fetch tools: {sanitize_error_message(error)}",
    )


async def _fetch_tools(
    raw_id: Optional[str], response: Response, db: AsyncSession, mcp_service: McpService
) -> McpToolsResponse:
    if not raw_id:
        logger.warning("MCP tools request missing MCP ID parameter")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MCP_ID_REQUIRED)

    mcp_id = parse_uuid(raw_id)
    if mcp_id is None:
        raise not_found(MCP_NOT_FOUND)
    mcp = await mcp_crud.get_mcp(db, mcp_id)

    start_time = time.perf_counter()
    try:
        tools = await mcp_service.get_tools(
            McpServerConfig(id=str(mcp.id), name=mcp.name, url=mcp.url)
        )
    except Exception as e:
        response_time = (time.perf_counter() - start_time) * 1000
        logger.warning(
            f"MCP tools request for {mcp.name} failed after {response_time:.0f}ms: {e}"
        )
        raise mcp_error_to_http(e)

    response_time = (time.perf_counter() - start_time) * 1000
    logger.info(f"Fetched {len(tools)} tools from MCP {mcp.name} in {response_time:.0f}ms")
    response.headers["X-MCP-Service-Status"] = "healthy"
    return McpToolsResponse(tools=tools)


@router.get(
    "",
    response_model=List[McpWithDomain],
    summary="List MCP servers",
    description="List MCP servers, newest first, with the hostname of each URL as `domain`.",
)
async def list_mcps(db: AsyncSession = Depends(get_db)):
    return await mcp_crud.get_mcps(db)


@router.post(
    "",
    response_model=McpWithDomain,
    status_code=status.HTTP_201_CREATED,
    summary="Register an MCP server",
)
@limiter.limit(API_LIMIT)
async def create_mcp(
    request: Request,
    mcp_data: McpCreate,
    db: AsyncSession = Depends(get_db),
):
    return await mcp_crud.create_mcp(db, mcp_data)


# Declared before /{mcp_id} so that "tools" is not read as an id
@router.get(
    "/tools",
    response_model=McpToolsResponse,
    summary="List tools of an MCP server by query parameter",
)
@limiter.limit(INTENSIVE_LIMIT)
async def get_mcp_tools_by_query(
    request: Request,
    response: Response,
    mcp_id: Optional[str] = Query(None, alias="id", description="MCP server ID"),
    db: AsyncSession = Depends(get_db),
    mcp_service: McpService = Depends(get_mcp_service),
):
    return await _fetch_tools(mcp_id, response, db, mcp_service)


@router.get("/{mcp_id}", response_model=McpWithDomain, summary="Get an MCP server")
async def get_mcp(mcp_id: UUID, db: AsyncSession = Depends(get_db)):
    return await mcp_crud.get_mcp(db, mcp_id)


@router.put("/{mcp_id}", response_model=McpWithDomain, summary="Update an MCP server")
@limiter.limit(API_LIMIT)
async def update_mcp(
    request: Request,
    mcp_id: UUID,
    mcp_data: McpUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await mcp_crud.update_mcp(db, mcp_id, mcp_data)


@router.get(
    "/{mcp_id}/tools",
    response_model=McpToolsResponse,
    summary="List tools of an MCP server",
    description="Ask the MCP server for its tools over a pooled connection.",
)
@limiter.limit(INTENSIVE_LIMIT)
async def get_mcp_tools(
    request: Request,
    response: Response,
    mcp_id: str,
    db: AsyncSession = Depends(get_db),
    mcp_service: McpService = Depends(get_mcp_service),
):
    return await _fetch_tools(mcp_id, response, db, mcp_service)
