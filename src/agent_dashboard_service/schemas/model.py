from datetime import datetime
from typing import Annotated, Dict, Optional
from uuid import UUID

from pydantic import AfterValidator, Field

from ..constants import MODEL_NAME_MAX_LENGTH, PROVIDER_REQUIRED
from ..models.model import Provider
from .common import ApiSchema
from .validation import EntityValidation, FieldDefinition, MessageGetter, validation_error


def _model_fields(get_message: MessageGetter) -> Dict[str, FieldDefinition]:
    def require_provider(value: Optional[Provider]) -> Provider:
        if value is None:
            raise validation_error("provider_required", get_message("provider_required"))
        return value

    return {
        "provider": (
            Annotated[Optional[Provider], AfterValidator(require_provider)],
            Field(None, validate_default=True),
        ),
    }


model_validation = EntityValidation(
    entity_name="Model",
    name_max_length=MODEL_NAME_MAX_LENGTH,
    custom_fields=_model_fields,
    extra_messages={"provider_required": PROVIDER_REQUIRED},
)

ModelCreate = model_validation.create_schema("ModelCreate")
ModelUpdate = model_validation.create_update_schema("ModelUpdate")


class ModelRead(ApiSchema):
    """Schema for model responses."""
    id: UUID
    name: str
    provider: Provider
    created_at: datetime
    updated_at: datetime
