from .agent import (
    AgentCreate,
    AgentDetail,
    AgentMcpToolRead,
    AgentRead,
    AgentSummary,
    AgentToolRead,
    AgentUpdate,
    LLMConfig,
)
from .common import ApiSchema, ErrorResponse, MessageResponse, ValidationErrorResponse
from .mcp import McpCreate, McpRead, McpToolsResponse, McpUpdate, McpWithDomain
from .model import ModelCreate, ModelRead, ModelUpdate
from .prompt import PromptCreate, PromptRead, PromptSummary, PromptUpdate
from .prompt_label import PromptLabelCreate, PromptLabelRead, PromptLabelUpdate
from .prompt_version import PromptVersionCreate, PromptVersionLabelUpdate, PromptVersionRead
from .tool import ToolCreate, ToolRead, ToolUpdate
