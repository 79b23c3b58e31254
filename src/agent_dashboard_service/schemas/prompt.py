from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import Field

from ..constants import NAME_REQUIRED, PROMPT_DESCRIPTION_MAX_LENGTH, PROMPT_NAME_MAX_LENGTH
from .common import ApiSchema
from .prompt_version import PromptVersionRead
from .validation import create_message_getter, description_field, name_field, required_text

_prompt_messages = create_message_getter(
    {
        "name_required": NAME_REQUIRED,
        "name_max_length": f"Name must be less than {PROMPT_NAME_MAX_LENGTH} characters",
        "description_max_length": (
            f"Description must be less than {PROMPT_DESCRIPTION_MAX_LENGTH} characters"
        ),
        "content_required": "Content is required",
    }
)

PromptName = name_field(PROMPT_NAME_MAX_LENGTH, _prompt_messages, restrict_charset=False)
PromptDescription = description_field(PROMPT_DESCRIPTION_MAX_LENGTH, _prompt_messages)


class PromptUpdate(ApiSchema):
    """Schema for updating a prompt's name and description. Content changes go through versions."""
    name: PromptName
    description: PromptDescription = None


class PromptCreate(PromptUpdate):
    """Schema for creating a prompt together with its first version."""
    content: Annotated[
        str, required_text(_prompt_messages("content_required"), "content_required")
    ]
    prompt_label_id: Optional[str] = Field(
        None, description="Label to attach to the initial version"
    )


class PromptSummary(ApiSchema):
    """Prompt without its versions, as embedded in agent responses."""
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PromptRead(PromptSummary):
    """Schema for prompt responses including version history (newest first)."""
    versions: List[PromptVersionRead] = Field(default_factory=list)
