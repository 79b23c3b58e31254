from datetime import datetime
from typing import Optional
from uuid import UUID

from ..constants import AGENT_DESCRIPTION_MAX_LENGTH, AGENT_NAME_MAX_LENGTH
from .common import ApiSchema
from .validation import EntityValidation

# Tools share the agent name and description limits
tool_validation = EntityValidation(
    entity_name="Tool",
    name_max_length=AGENT_NAME_MAX_LENGTH,
    description_max_length=AGENT_DESCRIPTION_MAX_LENGTH,
)

ToolCreate = tool_validation.create_schema("ToolCreate")
ToolUpdate = tool_validation.create_update_schema("ToolUpdate")


class ToolRead(ApiSchema):
    """Schema for tool responses."""
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
