from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..constants import AGENT_HIERARCHY_CYCLE, AGENT_SELF_REFERENCE
from ..logging_config import logger
from ..models import Agent, AgentMcpTool, AgentTool, Mcp, Model, Prompt, PromptLabel, Tool
from ..utils.helpers import unique_in_order
from .common import invalid_reference, not_found, reference_id, reference_ids
from .prompt_labels import resolve_label_reference


@dataclass
class AgentReferences:
    """Validated foreign references from an agent request body."""
    model: Model
    prompt: Prompt
    label: Optional[PromptLabel]
    mcp_tools: List[Tuple[UUID, str]] = field(default_factory=list)
    tool_ids: List[UUID] = field(default_factory=list)
    sub_agents: List[Agent] = field(default_factory=list)


def _agent_query(tenant_id: str, with_tools: bool = False):
    options = [
        selectinload(Agent.model),
        selectinload(Agent.prompt),
        selectinload(Agent.label),
        selectinload(Agent.mcp_tools).selectinload(AgentMcpTool.mcp),
        selectinload(Agent.sub_agents),
        selectinload(Agent.parent),
    ]
    if with_tools:
        options.append(selectinload(Agent.tools).selectinload(AgentTool.tool))
    return (
        select(Agent)
        .where(Agent.tenant_id == tenant_id)
        .options(*options)
        .execution_options(populate_existing=True)
    )


def _config_value(config) -> Optional[Dict[str, Any]]:
    if config is None:
        return None
    return config.model_dump(by_alias=True, exclude_unset=True)


async def get_agents(db: AsyncSession, tenant_id: str) -> List[Agent]:
    """Get the tenant's agents, newest first, with model, prompt, label, MCP tools and hierarchy."""
    result = await db.execute(
        _agent_query(tenant_id).order_by(Agent.created_at.desc())
    )
    return list(result.scalars().all())


async def get_agent(
    db: AsyncSession, agent_id: UUID, tenant_id: str, with_tools: bool = False
) -> Agent:
    """
    Get an agent of the tenant by ID.

    Args:
        db: Database session
        agent_id: Agent ID
        tenant_id: Tenant the agent must belong to
        with_tools: Also load granted local tools

    Raises:
        HTTPException: If the agent is not found in the tenant
    """
    result = await db.execute(
        _agent_query(tenant_id, with_tools=with_tools).where(Agent.id == agent_id)
    )
    agent = result.scalar_one_or_none()
    if not agent:
        raise not_found()
    return agent


async def _ancestor_ids(db: AsyncSession, agent_id: UUID) -> Set[UUID]:
    ancestors: Set[UUID] = set()
    current = await db.scalar(select(Agent.parent_id).where(Agent.id == agent_id))
    while current is not None and current not in ancestors:
        ancestors.add(current)
        current = await db.scalar(select(Agent.parent_id).where(Agent.id == current))
    return ancestors


async def _resolve_sub_agents(
    db: AsyncSession,
    values: Optional[List[str]],
    tenant_id: str,
    agent_id: Optional[UUID],
) -> List[Agent]:
    sub_agent_ids = unique_in_order(reference_ids(values or []))
    if not sub_agent_ids:
        return []
    if agent_id is not None and agent_id in sub_agent_ids:
        raise invalid_reference(AGENT_SELF_REFERENCE)

    result = await db.execute(
        select(Agent).where(
            and_(Agent.id.in_(sub_agent_ids), Agent.tenant_id == tenant_id)
        )
    )
    found = {agent.id: agent for agent in result.scalars().all()}
    if len(found) != len(sub_agent_ids):
        raise invalid_reference()

    if agent_id is not None:
        ancestors = await _ancestor_ids(db, agent_id)
        if ancestors.intersection(sub_agent_ids):
            raise invalid_reference(AGENT_HIERARCHY_CYCLE)

    return [found[sub_agent_id] for sub_agent_id in sub_agent_ids]


async def _resolve_references(
    db: AsyncSession, agent_data, tenant_id: str, agent_id: Optional[UUID] = None
) -> AgentReferences:
    """
    Check every id in an agent request body.

    Raises:
        HTTPException: 422 when any referenced row is missing or malformed
    """
    model = await db.get(Model, reference_id(agent_data.model_id))
    if not model:
        raise invalid_reference()
    prompt = await db.get(Prompt, reference_id(agent_data.prompt_id))
    if not prompt:
        raise invalid_reference()
    label = await resolve_label_reference(db, agent_data.label_id, tenant_id)

    mcp_tools = []
    for value in unique_in_order(agent_data.mcp_tools or []):
        mcp_id, _, tool_name = value.partition(":")
        mcp_tools.append((reference_id(mcp_id), tool_name))
    mcp_ids = {mcp_id for mcp_id, _ in mcp_tools}
    if mcp_ids:
        found = await db.scalars(select(Mcp.id).where(Mcp.id.in_(mcp_ids)))
        if set(found.all()) != mcp_ids:
            raise invalid_reference()

    tool_ids = unique_in_order(reference_ids(agent_data.tools or []))
    if tool_ids:
        found = await db.scalars(select(Tool.id).where(Tool.id.in_(tool_ids)))
        if len(set(found.all())) != len(tool_ids):
            raise invalid_reference()

    sub_agents = await _resolve_sub_agents(
        db, agent_data.sub_agents, tenant_id, agent_id
    )

    return AgentReferences(
        model=model,
        prompt=prompt,
        label=label,
        mcp_tools=mcp_tools,
        tool_ids=tool_ids,
        sub_agents=sub_agents,
    )


async def create_agent(db: AsyncSession, agent_data, tenant_id: str) -> Agent:
    """
    Create an agent with its MCP tools, local tools and sub-agents.

    Args:
        db: Database session
        agent_data: Validated AgentCreate body
        tenant_id: Tenant the agent is created in

    Returns:
        The created agent with all relations loaded
    """
    refs = await _resolve_references(db, agent_data, tenant_id)

    agent = Agent(
        tenant_id=tenant_id,
        name=agent_data.name,
        description=agent_data.description,
        model_id=refs.model.id,
        prompt_id=refs.prompt.id,
        label_id=refs.label.id if refs.label else None,
        config=_config_value(agent_data.config),
    )
    agent.mcp_tools = [
        AgentMcpTool(mcp_id=mcp_id, tool_name=tool_name)
        for mcp_id, tool_name in refs.mcp_tools
    ]
    agent.tools = [AgentTool(tool_id=tool_id) for tool_id in refs.tool_ids]
    agent.sub_agents = refs.sub_agents

    db.add(agent)
    await db.commit()

    logger.info(f"Created agent {agent.id} ('{agent.name}') for tenant {tenant_id}")
    return await get_agent(db, agent.id, tenant_id, with_tools=True)


async def update_agent(
    db: AsyncSession, agent_id: UUID, agent_data, tenant_id: str
) -> Agent:
    """
    Replace an agent's fields and relations.

    Omitted ``mcpTools``, ``tools`` and ``subAgents`` clear the agent's
    current ones. Local tool links that are kept stay untouched.
    """
    agent = await get_agent(db, agent_id, tenant_id, with_tools=True)
    refs = await _resolve_references(db, agent_data, tenant_id, agent_id=agent.id)

    agent.name = agent_data.name
    agent.description = agent_data.description
    agent.model_id = refs.model.id
    agent.prompt_id = refs.prompt.id
    agent.label_id = refs.label.id if refs.label else None
    agent.config = _config_value(agent_data.config)

    agent.mcp_tools = [
        AgentMcpTool(mcp_id=mcp_id, tool_name=tool_name)
        for mcp_id, tool_name in refs.mcp_tools
    ]
    existing_links = {link.tool_id: link for link in agent.tools}
    agent.tools = [
        existing_links.get(tool_id) or AgentTool(tool_id=tool_id)
        for tool_id in refs.tool_ids
    ]
    agent.sub_agents = refs.sub_agents

    await db.commit()

    logger.info(f"Updated agent {agent.id}")
    return await get_agent(db, agent.id, tenant_id, with_tools=True)
