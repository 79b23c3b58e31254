from agent_dashboard_service.crud.agents import (
    create_agent,
    get_agent,
    get_agents,
    update_agent,
)
from agent_dashboard_service.crud.mcps import create_mcp, get_mcp, get_mcps, update_mcp
from agent_dashboard_service.crud.models import (
    create_model,
    get_model,
    get_models,
    update_model,
)
from agent_dashboard_service.crud.prompt_labels import (
    create_prompt_label,
    get_prompt_label,
    get_prompt_label_by_name,
    get_prompt_labels,
    update_prompt_label,
)
from agent_dashboard_service.crud.prompt_versions import (
    create_prompt_version,
    get_prompt_version,
    get_versions_for_prompt,
    set_prompt_version_label,
)
from agent_dashboard_service.crud.prompts import (
    create_prompt,
    get_prompt,
    get_prompt_by_name,
    get_prompts,
    update_prompt,
)
from agent_dashboard_service.crud.tools import (
    create_tool,
    delete_tool,
    get_tool,
    get_tools,
    update_tool,
)

__all__ = [
    # Models
    "create_model",
    "get_model",
    "get_models",
    "update_model",

    # Prompts and versions
    "create_prompt",
    "get_prompt",
    "get_prompt_by_name",
    "get_prompts",
    "update_prompt",
    "create_prompt_version",
    "get_prompt_version",
    "get_versions_for_prompt",
    "set_prompt_version_label",

    # Prompt labels
    "create_prompt_label",
    "get_prompt_label",
    "get_prompt_label_by_name",
    "get_prompt_labels",
    "update_prompt_label",

    # Tools and MCP servers
    "create_tool",
    "delete_tool",
    "get_tool",
    "get_tools",
    "update_tool",
    "create_mcp",
    "get_mcp",
    "get_mcps",
    "update_mcp",

    # Agents
    "create_agent",
    "get_agent",
    "get_agents",
    "update_agent",
]
