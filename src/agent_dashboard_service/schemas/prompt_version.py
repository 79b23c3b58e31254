from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, BeforeValidator, Field

from ..constants import CHANGE_NOTE_MAX_LENGTH, CONTENT_REQUIRED
from .common import ApiSchema
from .prompt_label import PromptLabelRead
from .validation import validation_error, required_text


def _check_change_note(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > CHANGE_NOTE_MAX_LENGTH:
        raise validation_error(
            "change_note_max_length",
            f"Change note must be {CHANGE_NOTE_MAX_LENGTH} characters or less",
        )
    return value


def _blank_to_none(value):
    return None if value == "" else value


class PromptVersionCreate(ApiSchema):
    """Schema for adding a version to an existing prompt."""
    prompt_id: Annotated[str, required_text("Prompt is required", "prompt_id_required")]
    content: Annotated[str, required_text(CONTENT_REQUIRED, "content_required")]
    change_note: Annotated[Optional[str], AfterValidator(_check_change_note)] = None
    label_id: Annotated[Optional[str], BeforeValidator(_blank_to_none)] = None


class PromptVersionLabelUpdate(ApiSchema):
    """Schema for moving a label onto a version. An empty string or null clears it."""
    label_id: Annotated[Optional[str], BeforeValidator(_blank_to_none)] = Field(
        None, description="Label to attach, or null to detach"
    )


class PromptVersionRead(ApiSchema):
    """Schema for prompt version responses."""
    id: UUID
    prompt_id: UUID
    version: int
    content: str
    change_note: Optional[str] = None
    label_id: Optional[UUID] = None
    label: Optional[PromptLabelRead] = None
    created_at: datetime
    updated_at: datetime
