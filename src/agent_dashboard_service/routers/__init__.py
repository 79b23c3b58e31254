"""
Exports the API routers of the Agent Dashboard Service.
"""

from .agent_routes import router as agent_router
from .health import router as health_router
from .mcp_routes import router as mcp_router
from .model_routes import router as model_router
from .prompt_label_routes import router as prompt_label_router
from .prompt_routes import router as prompt_router
from .prompt_version_routes import router as prompt_version_router
from .tool_routes import router as tool_router

__all__ = [
    "agent_router",
    "health_router",
    "mcp_router",
    "model_router",
    "prompt_label_router",
    "prompt_router",
    "prompt_version_router",
    "tool_router",
]
