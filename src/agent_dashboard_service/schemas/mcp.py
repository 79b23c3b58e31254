from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from pydantic import Field, computed_field

from ..constants import MCP_NAME_MAX_LENGTH
from ..utils.url_utils import get_domain_from_url
from .common import ApiSchema
from .validation import EntityValidation, url_field

mcp_validation = EntityValidation(
    entity_name="MCP",
    name_max_length=MCP_NAME_MAX_LENGTH,
    custom_fields=lambda get_message: {"url": (url_field(get_message), ...)},
)

McpCreate = mcp_validation.create_schema("McpCreate")
McpUpdate = mcp_validation.create_update_schema("McpUpdate")


class McpRead(ApiSchema):
    """Schema for MCP server responses."""
    id: UUID
    name: str
    url: str
    created_at: datetime
    updated_at: datetime


class McpWithDomain(McpRead):
    """MCP server response with the hostname of its URL."""

    @computed_field
    @property
    def domain(self) -> str:
        return get_domain_from_url(self.url)


class McpToolsResponse(ApiSchema):
    """Tools advertised by an MCP server."""
    tools: List[Dict[str, Any]] = Field(default_factory=list)
