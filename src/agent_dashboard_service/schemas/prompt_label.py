from datetime import datetime
from uuid import UUID

from ..constants import LABEL_NAME_MAX_LENGTH, LABEL_NAME_REQUIRED, label_name_max_length_message
from .common import ApiSchema
from .validation import create_message_getter, name_field

_label_messages = create_message_getter(
    {
        "name_required": LABEL_NAME_REQUIRED,
        "name_max_length": label_name_max_length_message(LABEL_NAME_MAX_LENGTH),
    }
)

LabelName = name_field(
    LABEL_NAME_MAX_LENGTH, _label_messages, restrict_charset=False, strip=True
)


class PromptLabelCreate(ApiSchema):
    """Schema for creating a prompt label. The name is trimmed before checks."""
    name: LabelName


class PromptLabelUpdate(PromptLabelCreate):
    """Schema for renaming a prompt label."""


class PromptLabelRead(ApiSchema):
    """Schema for prompt label responses."""
    id: UUID
    tenant_id: str
    name: str
    created_at: datetime
    updated_at: datetime
