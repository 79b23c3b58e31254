from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..logging_config import logger
from ..models import Model
from .common import not_found


async def get_models(db: AsyncSession) -> List[Model]:
    """Get all registered models, newest first."""
    result = await db.execute(select(Model).order_by(Model.created_at.desc()))
    return list(result.scalars().all())


async def get_model(db: AsyncSession, model_id: UUID) -> Model:
    """
    Get a model by ID.

    Raises:
        HTTPException: If the model is not found
    """
    model = await db.get(Model, model_id)
    if not model:
        raise not_found()
    return model


async def create_model(db: AsyncSession, model_data) -> Model:
    """Register a new model."""
    model = Model(name=model_data.name, provider=model_data.provider)
    db.add(model)
    await db.commit()
    await db.refresh(model)

    logger.info(f"Created model {model.id} ({model.provider.value}/{model.name})")
    return model


async def update_model(db: AsyncSession, model_id: UUID, model_data) -> Model:
    """Replace a model's name and provider."""
    model = await get_model(db, model_id)
    model.name = model_data.name
    model.provider = model_data.provider

    await db.commit()
    await db.refresh(model)
    return model
