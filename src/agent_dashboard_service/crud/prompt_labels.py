from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..constants import LABEL_ALREADY_EXISTS
from ..logging_config import logger
from ..models import PromptLabel
from .common import invalid_reference, not_found, reference_id


async def get_prompt_labels(db: AsyncSession, tenant_id: str) -> List[PromptLabel]:
    """Get the tenant's prompt labels, oldest first."""
    result = await db.execute(
        select(PromptLabel)
        .where(PromptLabel.tenant_id == tenant_id)
        .order_by(PromptLabel.created_at.asc())
    )
    return list(result.scalars().all())


async def get_prompt_label(
    db: AsyncSession, label_id: UUID, tenant_id: str
) -> PromptLabel:
    """
    Get a prompt label by ID within the tenant.

    Raises:
        HTTPException: If the label is not found or belongs to another tenant
    """
    result = await db.execute(
        select(PromptLabel).where(
            and_(PromptLabel.id == label_id, PromptLabel.tenant_id == tenant_id)
        )
    )
    label = result.scalar_one_or_none()
    if not label:
        raise not_found()
    return label


async def get_prompt_label_by_name(
    db: AsyncSession, name: str, tenant_id: str
) -> Optional[PromptLabel]:
    result = await db.execute(
        select(PromptLabel).where(
            and_(PromptLabel.name == name, PromptLabel.tenant_id == tenant_id)
        )
    )
    return result.scalar_one_or_none()


async def resolve_label_reference(
    db: AsyncSession, label_id: Optional[str], tenant_id: str
) -> Optional[PromptLabel]:
    """
    Look up a label id taken from a request body.

    Returns None for an empty reference and raises 422 when the id is
    malformed or names no label of the tenant.
    """
    if not label_id:
        return None
    result = await db.execute(
        select(PromptLabel).where(
            and_(
                PromptLabel.id == reference_id(label_id),
                PromptLabel.tenant_id == tenant_id,
            )
        )
    )
    label = result.scalar_one_or_none()
    if not label:
        raise invalid_reference()
    return label


def _name_taken() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=LABEL_ALREADY_EXISTS)


async def _ensure_name_available(
    db: AsyncSession, name: str, tenant_id: str, label_id: Optional[UUID] = None
) -> None:
    existing = await get_prompt_label_by_name(db, name, tenant_id)
    if existing and existing.id != label_id:
        raise _name_taken()


async def _commit_named(db: AsyncSession, label: PromptLabel, tenant_id: str) -> None:
    name = label.name
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(
            f"Prompt label '{name}' was taken concurrently for tenant "
            f"{tenant_id}: {e.orig}"
        )
        raise _name_taken() from e
    await db.refresh(label)


async def create_prompt_label(
    db: AsyncSession, label_data, tenant_id: str
) -> PromptLabel:
    """
    Create a prompt label for the tenant.

    Raises:
        HTTPException: If the tenant already has a label with that name
    """
    await _ensure_name_available(db, label_data.name, tenant_id)

    label = PromptLabel(name=label_data.name, tenant_id=tenant_id)
    db.add(label)
    await _commit_named(db, label, tenant_id)

    logger.info(f"Created prompt label '{label.name}' for tenant {tenant_id}")
    return label


async def update_prompt_label(
    db: AsyncSession, label_id: UUID, label_data, tenant_id: str
) -> PromptLabel:
    """Rename a prompt label."""
    label = await get_prompt_label(db, label_id, tenant_id)
    await _ensure_name_available(db, label_data.name, tenant_id, label_id=label.id)

    label.name = label_data.name
    await _commit_named(db, label, tenant_id)
    return label
