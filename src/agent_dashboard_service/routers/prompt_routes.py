from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.crud import prompts as prompt_crud
from agent_dashboard_service.db import get_db
from agent_dashboard_service.dependencies import get_tenant_id
from agent_dashboard_service.rate_limiting import API_LIMIT, limiter
from agent_dashboard_service.schemas.prompt import PromptCreate, PromptRead, PromptUpdate
from agent_dashboard_service.schemas.prompt_version import PromptVersionRead
from agent_dashboard_service.utils import filter_prompt_versions_by_label
from agent_dashboard_service.utils.helpers import parse_uuid

router = APIRouter()

# labelId value selecting versions without a label
UNLABELLED = "none"


@router.get(
    "",
    response_model=List[PromptRead],
    summary="List prompts",
    description="List prompts, newest first, each with its versions (highest first) and their labels.",
)
async def list_prompts(db: AsyncSession = Depends(get_db)):
    return await prompt_crud.get_prompts(db)


@router.post(
    "",
    response_model=PromptRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a prompt",
    description="Create a prompt and its first version from the given content.",
)
@limiter.limit(API_LIMIT)
async def create_prompt(
    request: Request,
    prompt_data: PromptCreate,
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return await prompt_crud.create_prompt(db, prompt_data, tenant_id)


@router.get("/{prompt_id}", response_model=PromptRead, summary="Get a prompt")
async def get_prompt(prompt_id: UUID, db: AsyncSession = Depends(get_db)):
    return await prompt_crud.get_prompt(db, prompt_id)


@router.put("/{prompt_id}", response_model=PromptRead, summary="Update a prompt")
@limiter.limit(API_LIMIT)
async def update_prompt(
    request: Request,
    prompt_id: UUID,
    prompt_data: PromptUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Rename a prompt or change its description. Content changes go through versions."""
    return await prompt_crud.update_prompt(db, prompt_id, prompt_data)


@router.get(
    "/{prompt_id}/versions",
    response_model=List[PromptVersionRead],
    summary="List versions of a prompt",
)
async def list_prompt_versions(
    prompt_id: UUID,
    label_id: Optional[str] = Query(
        None,
        alias="labelId",
        description=f"Only versions with this label, or '{UNLABELLED}' for unlabelled ones",
    ),
    db: AsyncSession = Depends(get_db),
):
    prompt = await prompt_crud.get_prompt(db, prompt_id)
    versions = prompt.versions

    if label_id is not None:
        if label_id == UNLABELLED:
            versions = filter_prompt_versions_by_label(versions, None)
        else:
            parsed = parse_uuid(label_id)
            if parsed is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid label ID"
                )
            versions = filter_prompt_versions_by_label(versions, parsed)
    return versions
