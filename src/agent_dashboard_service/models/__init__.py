from .agent import Agent, AgentMcpTool, AgentTool
from .base import BaseModel
from .mcp import Mcp
from .model import Model, Provider
from .prompt import Prompt, PromptLabel, PromptVersion
from .tool import Tool

__all__ = [
    "Agent",
    "AgentMcpTool",
    "AgentTool",
    "BaseModel",
    "Mcp",
    "Model",
    "Prompt",
    "PromptLabel",
    "PromptVersion",
    "Provider",
    "Tool",
]
