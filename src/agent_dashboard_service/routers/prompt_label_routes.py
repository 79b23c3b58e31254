from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.crud import prompt_labels as label_crud
from agent_dashboard_service.db import get_db
from agent_dashboard_service.dependencies import get_tenant_id
from agent_dashboard_service.rate_limiting import API_LIMIT, limiter
from agent_dashboard_service.schemas.prompt_label import (
    PromptLabelCreate,
    PromptLabelRead,
    PromptLabelUpdate,
)

router = APIRouter()


@router.get(
    "",
    response_model=List[PromptLabelRead],
    summary="List prompt labels",
    description="List the tenant's prompt labels in creation order.",
)
async def list_prompt_labels(
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return await label_crud.get_prompt_labels(db, tenant_id)


@router.post(
    "",
    response_model=PromptLabelRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a prompt label",
)
@limiter.limit(API_LIMIT)
async def create_prompt_label(
    request: Request,
    label_data: PromptLabelCreate,
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Create a label. Names are unique within a tenant."""
    return await label_crud.create_prompt_label(db, label_data, tenant_id)


@router.put("/{label_id}", response_model=PromptLabelRead, summary="Rename a prompt label")
@limiter.limit(API_LIMIT)
async def update_prompt_label(
    request: Request,
    label_id: UUID,
    label_data: PromptLabelUpdate,
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return await label_crud.update_prompt_label(db, label_id, label_data, tenant_id)
