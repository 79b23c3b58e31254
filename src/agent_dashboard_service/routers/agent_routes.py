from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.crud import agents as agent_crud
from agent_dashboard_service.db import get_db
from agent_dashboard_service.dependencies import get_tenant_id
from agent_dashboard_service.rate_limiting import API_LIMIT, limiter
from agent_dashboard_service.schemas.agent import (
    AgentCreate,
    AgentDetail,
    AgentRead,
    AgentUpdate,
)

router = APIRouter()


@router.get(
    "",
    response_model=List[AgentRead],
    summary="List agents",
    description=(
        "List the tenant's agents, newest first, with model, prompt, label, "
        "MCP tools, sub-agents and parent."
    ),
)
async def list_agents(
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return await agent_crud.get_agents(db, tenant_id)


@router.post(
    "",
    response_model=AgentDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create an agent",
    description="Create an agent in the current tenant. Every referenced id must exist.",
)
@limiter.limit(API_LIMIT)
async def create_agent(
    request: Request,
    agent_data: AgentCreate,
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return await agent_crud.create_agent(db, agent_data, tenant_id)


@router.get("/{agent_id}", response_model=AgentDetail, summary="Get an agent")
async def get_agent(
    agent_id: UUID,
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Get an agent including its granted local tools."""
    return await agent_crud.get_agent(db, agent_id, tenant_id, with_tools=True)


@router.put(
    "/{agent_id}",
    response_model=AgentDetail,
    summary="Update an agent",
    description=(
        "Replace the agent's fields. MCP tools, tools and sub-agents are set to "
        "exactly the given lists; omitted lists clear them."
    ),
)
@limiter.limit(API_LIMIT)
async def update_agent(
    request: Request,
    agent_id: UUID,
    agent_data: AgentUpdate,
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return await agent_crud.update_agent(db, agent_id, agent_data, tenant_id)
