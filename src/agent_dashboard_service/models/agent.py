import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db import Base
from .base import BaseModel, TimestampMixin
from .mcp import Mcp
from .model import Model
from .prompt import Prompt, PromptLabel
from .tool import Tool


class Agent(BaseModel):
    """
    Model representing an agent configuration.

    An agent pairs a language model with a prompt (optionally pinned to a
    labelled version), carries free-form LLM configuration, and may be granted
    local tools, MCP tools and sub-agents. Agents belong to a tenant.
    """

    __tablename__ = "agents"

    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    model_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("models.id"), nullable=False, index=True
    )
    prompt_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("prompts.id"), nullable=False, index=True
    )
    label_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("prompt_labels.id", ondelete="SET NULL"),
        nullable=True,
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # LLM settings (temperature, maxTokens, ...) stored as-is
    config: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    model: Mapped[Model] = relationship()
    prompt: Mapped[Prompt] = relationship()
    label: Mapped[Optional[PromptLabel]] = relationship()

    parent: Mapped[Optional["Agent"]] = relationship(
        back_populates="sub_agents", remote_side="Agent.id"
    )
    sub_agents: Mapped[List["Agent"]] = relationship(
        back_populates="parent", order_by="Agent.created_at"
    )

    mcp_tools: Mapped[List["AgentMcpTool"]] = relationship(
        back_populates="agent",
        cascade="all, delete-orphan",
        order_by="AgentMcpTool.created_at",
    )
    tools: Mapped[List["AgentTool"]] = relationship(
        back_populates="agent",
        cascade="all, delete-orphan",
        order_by="AgentTool.created_at",
    )

    def __repr__(self):
        return f"<Agent(id='{self.id}', name='{self.name}', tenant_id='{self.tenant_id}')>"


class AgentMcpTool(BaseModel):
    """
    A single tool, by name, that an agent may call on an MCP server.
    """

    __tablename__ = "agent_mcp_tools"

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    mcp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("mcps.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tool_name: Mapped[str] = mapped_column(String(255), nullable=False)

    agent: Mapped[Agent] = relationship(back_populates="mcp_tools")
    mcp: Mapped[Optional[Mcp]] = relationship()


class AgentTool(TimestampMixin, Base):
    """
    Association between an agent and a local tool.
    """

    __tablename__ = "agent_tools"

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tool_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("tools.id", ondelete="CASCADE"),
        primary_key=True,
    )

    agent: Mapped[Agent] = relationship(back_populates="tools")
    tool: Mapped[Tool] = relationship(back_populates="agent_links")
