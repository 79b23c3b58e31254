from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.crud import models as model_crud
from agent_dashboard_service.db import get_db
from agent_dashboard_service.rate_limiting import API_LIMIT, limiter
from agent_dashboard_service.schemas.model import ModelCreate, ModelRead, ModelUpdate

router = APIRouter()


@router.get(
    "",
    response_model=List[ModelRead],
    summary="List models",
    description="List every registered language model, newest first.",
)
async def list_models(db: AsyncSession = Depends(get_db)):
    return await model_crud.get_models(db)


@router.post(
    "",
    response_model=ModelRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a model",
)
@limiter.limit(API_LIMIT)
async def create_model(
    request: Request,
    model_data: ModelCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a language model under a provider."""
    return await model_crud.create_model(db, model_data)


@router.get("/{model_id}", response_model=ModelRead, summary="Get a model")
async def get_model(model_id: UUID, db: AsyncSession = Depends(get_db)):
    return await model_crud.get_model(db, model_id)


@router.put("/{model_id}", response_model=ModelRead, summary="Update a model")
@limiter.limit(API_LIMIT)
async def update_model(
    request: Request,
    model_id: UUID,
    model_data: ModelUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace a model's name and provider."""
    return await model_crud.update_model(db, model_id, model_data)
