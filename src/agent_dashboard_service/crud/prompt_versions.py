from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..logging_config import logger
from ..models import Prompt, PromptVersion
from ..schemas.prompt_version import PromptVersionCreate, PromptVersionLabelUpdate
from ..utils.helpers import parse_uuid
from .common import not_found
from .prompt_labels import resolve_label_reference


async def get_prompt_version(db: AsyncSession, version_id: UUID) -> PromptVersion:
    """
    Get a prompt version with its label.

    Raises:
        HTTPException: If the version is not found
    """
    result = await db.execute(
        select(PromptVersion)
        .where(PromptVersion.id == version_id)
        .options(selectinload(PromptVersion.label))
        .execution_options(populate_existing=True)
    )
    version = result.scalar_one_or_none()
    if not version:
        raise not_found()
    return version


async def get_versions_for_prompt(
    db: AsyncSession, prompt_id: UUID
) -> List[PromptVersion]:
    """Versions of one prompt, highest version first."""
    result = await db.execute(
        select(PromptVersion)
        .where(PromptVersion.prompt_id == prompt_id)
        .options(selectinload(PromptVersion.label))
        .order_by(PromptVersion.version.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def _detach_label(
    db: AsyncSession,
    prompt_id: UUID,
    label_id: UUID,
    keep_version_id: Optional[UUID] = None,
) -> None:
    """Clear ``label_id`` from the prompt's versions, except ``keep_version_id``."""
    conditions = [
        PromptVersion.prompt_id == prompt_id,
        PromptVersion.label_id == label_id,
    ]
    if keep_version_id is not None:
        conditions.append(PromptVersion.id != keep_version_id)
    await db.execute(
        update(PromptVersion)
        .where(and_(*conditions))
        .values(label_id=None)
        .execution_options(synchronize_session=False)
    )


async def create_prompt_version(
    db: AsyncSession, version_data: PromptVersionCreate, tenant_id: str
) -> PromptVersion:
    """
    Append a version to a prompt.

    The prompt row is locked while the next version number is computed so
    that concurrent writers cannot both claim it. When a label is given it
    is first removed from the prompt's other versions.

    Args:
        db: Database session
        version_data: Validated request body
        tenant_id: Tenant owning the optional label

    Returns:
        The new version with its label loaded

    Raises:
        HTTPException: 404 if the prompt does not exist, 422 for an unknown label
    """
    prompt_id = parse_uuid(version_data.prompt_id)
    if prompt_id is None:
        raise not_found()

    result = await db.execute(
        select(Prompt.id).where(Prompt.id == prompt_id).with_for_update()
    )
    if result.scalar_one_or_none() is None:
        raise not_found()

    label = await resolve_label_reference(db, version_data.label_id, tenant_id)

    max_version = await db.scalar(
        select(func.max(PromptVersion.version)).where(
            PromptVersion.prompt_id == prompt_id
        )
    )
    next_version = (max_version or 0) + 1

    if label:
        await _detach_label(db, prompt_id, label.id)

    version = PromptVersion(
        prompt_id=prompt_id,
        version=next_version,
        content=version_data.content,
        change_note=version_data.change_note,
        label_id=label.id if label else None,
    )
    db.add(version)
    await db.commit()

    logger.info(f"Created version {next_version} of prompt {prompt_id}")
    return await get_prompt_version(db, version.id)


async def set_prompt_version_label(
    db: AsyncSession,
    version_id: UUID,
    label_data: PromptVersionLabelUpdate,
    tenant_id: str,
) -> PromptVersion:
    """Attach a label to a version (moving it off siblings) or clear it."""
    version = await get_prompt_version(db, version_id)
    label = await resolve_label_reference(db, label_data.label_id, tenant_id)

    if label:
        await _detach_label(db, version.prompt_id, label.id, keep_version_id=version.id)

    version.label_id = label.id if label else None
    await db.commit()

    logger.info(
        f"Set label of prompt version {version.id} to {label.name if label else None}"
    )
    return await get_prompt_version(db, version.id)
