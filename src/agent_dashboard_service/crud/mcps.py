from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..constants import MCP_NOT_FOUND
from ..logging_config import logger
from ..models import Mcp
from .common import not_found


async def get_mcps(db: AsyncSession) -> List[Mcp]:
    """Get all MCP servers, newest first."""
    result = await db.execute(select(Mcp).order_by(Mcp.created_at.desc()))
    return list(result.scalars().all())


async def get_mcp(db: AsyncSession, mcp_id: UUID) -> Mcp:
    """
    Get an MCP server by ID.

    Raises:
        HTTPException: If the MCP server is not found
    """
    mcp = await db.get(Mcp, mcp_id)
    if not mcp:
        raise not_found(MCP_NOT_FOUND)
    return mcp


async def create_mcp(db: AsyncSession, mcp_data) -> Mcp:
    """Register an MCP server."""
    mcp = Mcp(name=mcp_data.name, url=mcp_data.url)
    db.add(mcp)
    await db.commit()
    await db.refresh(mcp)

    logger.info(f"Registered MCP server {mcp.id} at {mcp.url}")
    return mcp


async def update_mcp(db: AsyncSession, mcp_id: UUID, mcp_data) -> Mcp:
    mcp = await get_mcp(db, mcp_id)
    mcp.name = mcp_data.name
    mcp.url = mcp_data.url

    await db.commit()
    await db.refresh(mcp)
    return mcp
