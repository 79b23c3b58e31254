"""Validation limits and shared messages."""

import re

# Field length limits
LABEL_NAME_MAX_LENGTH = 50
PROMPT_NAME_MAX_LENGTH = 100
PROMPT_DESCRIPTION_MAX_LENGTH = 500
MODEL_NAME_MAX_LENGTH = 100
CHANGE_NOTE_MAX_LENGTH = 500
AGENT_NAME_MAX_LENGTH = 100
AGENT_DESCRIPTION_MAX_LENGTH = 500
MCP_NAME_MAX_LENGTH = 100

# Letters, digits, hyphens, underscores and dots (model names, tool names, ...)
NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\-_\.]+$")

# Shared validation messages
NAME_REQUIRED = "Name is required"
PROVIDER_REQUIRED = "Provider is required"
CONTENT_REQUIRED = "Content is required"
NAME_INVALID_CHARS = (
    "Name can only contain letters, numbers, hyphens, underscores, and dots"
)
LABEL_NAME_REQUIRED = "Label name is required"


def name_max_length_message(max_length: int) -> str:
    return f"Name must be {max_length} characters or less"


def description_max_length_message(max_length: int) -> str:
    return f"Description must be {max_length} characters or less"


def label_name_max_length_message(max_length: int) -> str:
    return f"Label name must be {max_length} characters or less"


# Error messages returned by the API
PROMPT_ALREADY_EXISTS = "A prompt with this name already exists"
LABEL_ALREADY_EXISTS = "A label with this name already exists"
TOOL_NOT_FOUND = "tools.errors.toolNotFound"
MCP_NOT_FOUND = "MCP not found"
MCP_ID_REQUIRED = "MCP ID is required"
RESOURCE_NOT_FOUND = "Resource not found"
RESOURCE_ALREADY_EXISTS = "Resource already exists"
INVALID_REFERENCE = "Invalid reference"
DATABASE_ERROR = "Database error"
INTERNAL_SERVER_ERROR = "Internal server error"
VALIDATION_FAILED = "Validation failed"
INVALID_REQUEST_BODY = "Invalid request body"
INVALID_JSON = "Invalid JSON"
AGENT_SELF_REFERENCE = "An agent cannot be its own sub-agent"
AGENT_HIERARCHY_CYCLE = "A sub-agent cannot be an ancestor of the agent"
