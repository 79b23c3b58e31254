"""Admin API for AI agents, versioned prompts, labels, models, tools and MCP servers."""

__version__ = "0.1.0"
