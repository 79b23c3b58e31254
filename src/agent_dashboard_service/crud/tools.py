from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..constants import TOOL_NOT_FOUND
from ..logging_config import logger
from ..models import Tool
from .common import not_found


async def get_tools(db: AsyncSession) -> List[Tool]:
    """Get all local tools, newest first."""
    result = await db.execute(select(Tool).order_by(Tool.created_at.desc()))
    return list(result.scalars().all())


async def get_tool(db: AsyncSession, tool_id: UUID) -> Tool:
    """
    Get a tool by ID.

    Raises:
        HTTPException: If the tool is not found
    """
    tool = await db.get(Tool, tool_id)
    if not tool:
        raise not_found(TOOL_NOT_FOUND)
    return tool


async def create_tool(db: AsyncSession, tool_data) -> Tool:
    tool = Tool(name=tool_data.name, description=tool_data.description)
    db.add(tool)
    await db.commit()
    await db.refresh(tool)

    logger.info(f"Created tool {tool.id} ('{tool.name}')")
    return tool


async def update_tool(db: AsyncSession, tool_id: UUID, tool_data) -> Tool:
    tool = await get_tool(db, tool_id)
    tool.name = tool_data.name
    tool.description = tool_data.description

    await db.commit()
    await db.refresh(tool)
    return tool


async def delete_tool(db: AsyncSession, tool_id: UUID) -> bool:
    """
    Delete a tool and every agent's grant of it.

    Raises:
        HTTPException: If the tool is not found
    """
    result = await db.execute(
        select(Tool).where(Tool.id == tool_id).options(selectinload(Tool.agent_links))
    )
    tool = result.scalar_one_or_none()
    if not tool:
        raise not_found(TOOL_NOT_FOUND)

    await db.delete(tool)
    await db.commit()

    logger.info(f"Deleted tool {tool_id}")
    return True
