from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.constants import INVALID_REQUEST_BODY
from agent_dashboard_service.crud import prompt_versions as version_crud
from agent_dashboard_service.db import get_db
from agent_dashboard_service.dependencies import get_tenant_id
from agent_dashboard_service.rate_limiting import API_LIMIT, limiter
from agent_dashboard_service.schemas.common import error_body, format_validation_errors
from agent_dashboard_service.schemas.prompt_version import (
    PromptVersionCreate,
    PromptVersionLabelUpdate,
    PromptVersionRead,
)

router = APIRouter()


@router.post(
    "",
    response_model=PromptVersionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a prompt version",
    description=(
        "Append a version with the next version number. A given label is moved "
        "onto the new version from any other version of the same prompt."
    ),
)
@limiter.limit(API_LIMIT)
async def create_prompt_version(
    request: Request,
    version_data: PromptVersionCreate,
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return await version_crud.create_prompt_version(db, version_data, tenant_id)


@router.put(
    "/{version_id}",
    response_model=PromptVersionRead,
    summary="Set the label of a prompt version",
)
@limiter.limit(API_LIMIT)
async def update_prompt_version_label(
    request: Request,
    version_id: UUID,
    body: Any = Body(...),
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Attach ``labelId`` to the version, or clear the label with null or an empty string."""
    try:
        label_data = PromptVersionLabelUpdate.model_validate(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_body(INVALID_REQUEST_BODY, format_validation_errors(e.errors())),
        )
    return await version_crud.set_prompt_version_label(db, version_id, label_data, tenant_id)
