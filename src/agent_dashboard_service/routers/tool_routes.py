from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.crud import tools as tool_crud
from agent_dashboard_service.db import get_db
from agent_dashboard_service.rate_limiting import API_LIMIT, limiter
from agent_dashboard_service.schemas.common import MessageResponse
from agent_dashboard_service.schemas.tool import ToolCreate, ToolRead, ToolUpdate

router = APIRouter()


@router.get("", response_model=List[ToolRead], summary="List tools")
async def list_tools(db: AsyncSession = Depends(get_db)):
    """List local tools, newest first."""
    return await tool_crud.get_tools(db)


@router.post(
    "",
    response_model=ToolRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tool",
)
@limiter.limit(API_LIMIT)
async def create_tool(
    request: Request,
    tool_data: ToolCreate,
    db: AsyncSession = Depends(get_db),
):
    return await tool_crud.create_tool(db, tool_data)


@router.get("/{tool_id}", response_model=ToolRead, summary="Get a tool")
async def get_tool(tool_id: UUID, db: AsyncSession = Depends(get_db)):
    return await tool_crud.get_tool(db, tool_id)


@router.put("/{tool_id}", response_model=ToolRead, summary="Update a tool")
@limiter.limit(API_LIMIT)
async def update_tool(
    request: Request,
    tool_id: UUID,
    tool_data: ToolUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await tool_crud.update_tool(db, tool_id, tool_data)


@router.delete(
    "/{tool_id}",
    response_model=MessageResponse,
    summary="Delete a tool",
    description="Delete a tool. Agents that were granted it lose the grant.",
)
@limiter.limit(API_LIMIT)
async def delete_tool(
    request: Request,
    tool_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    await tool_crud.delete_tool(db, tool_id)
    return MessageResponse(message="Tool deleted successfully")
