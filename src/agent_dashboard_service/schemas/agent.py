from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional
from uuid import UUID

from pydantic import AfterValidator, ConfigDict, Field

from ..constants import AGENT_DESCRIPTION_MAX_LENGTH, AGENT_NAME_MAX_LENGTH
from .common import ApiSchema
from .mcp import McpRead
from .model import ModelRead
from .prompt import PromptSummary
from .prompt_label import PromptLabelRead
from .tool import ToolRead
from .validation import (
    EntityValidation,
    FieldDefinition,
    MessageGetter,
    required_text,
    validation_error,
)


class LLMConfig(ApiSchema):
    """
    Language model settings stored on an agent.

    Known keys are range-checked; any other keys are kept untouched.
    """

    model_config = ConfigDict(extra="allow")

    temperature: Optional[float] = Field(None, ge=0, le=2)
    max_tokens: Optional[int] = Field(None, ge=1)
    top_p: Optional[float] = Field(None, ge=0, le=1)
    frequency_penalty: Optional[float] = Field(None, ge=-2, le=2)
    presence_penalty: Optional[float] = Field(None, ge=-2, le=2)


def _check_mcp_tool_ref(value: str) -> str:
    mcp_id, _, tool_name = value.partition(":")
    if not mcp_id or not tool_name:
        raise validation_error(
            "mcp_tool_format", "MCP tools must use the format <mcpId>:<toolName>"
        )
    return value


McpToolRef = Annotated[str, AfterValidator(_check_mcp_tool_ref)]


def _agent_fields(get_message: MessageGetter) -> Dict[str, FieldDefinition]:
    return {
        "model_id": (
            Annotated[str, required_text(get_message("model_id_required"), "model_id_required")],
            ...,
        ),
        "prompt_id": (
            Annotated[str, required_text(get_message("prompt_id_required"), "prompt_id_required")],
            ...,
        ),
        "label_id": (Optional[str], None),
        "config": (Optional[LLMConfig], None),
        "mcp_tools": (Optional[List[McpToolRef]], None),
        "tools": (Optional[List[str]], None),
        "sub_agents": (Optional[List[str]], None),
    }


agent_validation = EntityValidation(
    entity_name="Agent",
    name_max_length=AGENT_NAME_MAX_LENGTH,
    description_max_length=AGENT_DESCRIPTION_MAX_LENGTH,
    custom_fields=_agent_fields,
    extra_messages={
        "model_id_required": "Model is required",
        "prompt_id_required": "Prompt is required",
    },
)

AgentCreate = agent_validation.create_schema("AgentCreate")
AgentUpdate = agent_validation.create_update_schema("AgentUpdate")


class AgentSummary(ApiSchema):
    """Agent columns without relations, as embedded for parents and sub-agents."""
    id: UUID
    tenant_id: str
    name: str
    description: Optional[str] = None
    model_id: UUID
    prompt_id: UUID
    label_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    config: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class AgentMcpToolRead(ApiSchema):
    id: UUID
    agent_id: UUID
    mcp_id: UUID
    tool_name: str
    mcp: Optional[McpRead] = None
    created_at: datetime


class AgentToolRead(ApiSchema):
    agent_id: UUID
    tool_id: UUID
    tool: ToolRead
    created_at: datetime


class AgentRead(AgentSummary):
    """Schema for agent responses with model, prompt, label, MCP tools and hierarchy."""
    model: ModelRead
    prompt: PromptSummary
    label: Optional[PromptLabelRead] = None
    mcp_tools: List[AgentMcpToolRead] = Field(default_factory=list)
    sub_agents: List[AgentSummary] = Field(default_factory=list)
    parent: Optional[AgentSummary] = None


class AgentDetail(AgentRead):
    """Single-agent response, additionally listing granted local tools."""
    tools: List[AgentToolRead] = Field(default_factory=list)
