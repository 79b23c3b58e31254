from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..constants import PROMPT_ALREADY_EXISTS
from ..logging_config import logger
from ..models import Prompt, PromptVersion
from ..schemas.prompt import PromptCreate, PromptUpdate
from .common import not_found
from .prompt_labels import resolve_label_reference


def _with_versions():
    return selectinload(Prompt.versions).selectinload(PromptVersion.label)


async def get_prompts(db: AsyncSession) -> List[Prompt]:
    """Get all prompts with their versions, newest prompt first."""
    result = await db.execute(
        select(Prompt).options(_with_versions()).order_by(Prompt.created_at.desc())
    )
    return list(result.scalars().all())


async def get_prompt(db: AsyncSession, prompt_id: UUID) -> Prompt:
    """
    Get a prompt with its versions (newest first) and their labels.

    Raises:
        HTTPException: If the prompt is not found
    """
    result = await db.execute(
        select(Prompt)
        .where(Prompt.id == prompt_id)
        .options(_with_versions())
        .execution_options(populate_existing=True)
    )
    prompt = result.scalar_one_or_none()
    if not prompt:
        raise not_found()
    return prompt


async def get_prompt_by_name(db: AsyncSession, name: str) -> Optional[Prompt]:
    result = await db.execute(select(Prompt).where(Prompt.name == name))
    return result.scalar_one_or_none()


def _name_taken() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=PROMPT_ALREADY_EXISTS)


async def _ensure_name_available(
    db: AsyncSession, name: str, prompt_id: Optional[UUID] = None
) -> None:
    existing = await get_prompt_by_name(db, name)
    if existing and existing.id != prompt_id:
        raise _name_taken()


async def _commit_named(db: AsyncSession, name: str) -> None:
    # A concurrent insert can still take the name after the check above
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Prompt name '{name}' was taken concurrently: {e.orig}")
        raise _name_taken() from e


async def create_prompt(
    db: AsyncSession, prompt_data: PromptCreate, tenant_id: str
) -> Prompt:
    """
    Create a prompt together with version 1 holding its content.

    Args:
        db: Database session
        prompt_data: Prompt data to create
        tenant_id: Tenant used to resolve the optional initial label

    Returns:
        Newly created prompt with its versions

    Raises:
        HTTPException: 409 if the name is taken, 422 if the label is unknown
    """
    await _ensure_name_available(db, prompt_data.name)
    label = await resolve_label_reference(db, prompt_data.prompt_label_id, tenant_id)

    prompt = Prompt(name=prompt_data.name, description=prompt_data.description)
    prompt.versions.append(
        PromptVersion(
            version=1,
            content=prompt_data.content,
            label_id=label.id if label else None,
        )
    )
    db.add(prompt)
    await _commit_named(db, prompt_data.name)

    logger.info(f"Created prompt {prompt.id} ('{prompt.name}') with initial version")
    return await get_prompt(db, prompt.id)


async def update_prompt(
    db: AsyncSession, prompt_id: UUID, prompt_data: PromptUpdate
) -> Prompt:
    """
    Update a prompt's name and description. The description is only
    touched when the request includes it.
    """
    prompt = await get_prompt(db, prompt_id)
    await _ensure_name_available(db, prompt_data.name, prompt_id=prompt.id)

    prompt.name = prompt_data.name
    if "description" in prompt_data.model_fields_set:
        prompt.description = prompt_data.description

    await _commit_named(db, prompt_data.name)
    return await get_prompt(db, prompt.id)
