"""
Helper functions for testing.
Insert rows directly through the ORM so tests can set up state without the API.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agent_dashboard_service.models import (
    Agent,
    Mcp,
    Model,
    Prompt,
    PromptLabel,
    PromptVersion,
    Tool,
)
from agent_dashboard_service.models.model import Provider


async def create_test_model(
    db_session: AsyncSession, name: str = "gpt-4o", provider: Provider = Provider.OPENAI
) -> Model:
    model = Model(name=name, provider=provider)
    db_session.add(model)
    await db_session.commit()
    return model


async def create_test_label(
    db_session: AsyncSession, name: str = "production", tenant_id: str = "test-tenant"
) -> PromptLabel:
    label = PromptLabel(name=name, tenant_id=tenant_id)
    db_session.add(label)
    await db_session.commit()
    return label


async def create_test_prompt(
    db_session: AsyncSession,
    name: str = "Test prompt",
    contents: Optional[List[str]] = None,
    description: Optional[str] = None,
) -> Prompt:
    """
    Create a prompt with one version per entry of ``contents``.

    Versions are numbered from 1 in list order.
    """
    prompt = Prompt(name=name, description=description)
    db_session.add(prompt)
    await db_session.flush()

    for number, content in enumerate(contents or ["You are a helpful assistant."], start=1):
        db_session.add(PromptVersion(prompt_id=prompt.id, version=number, content=content))
    await db_session.commit()
    return prompt


async def create_test_tool(
    db_session: AsyncSession, name: str = "web-search", description: Optional[str] = None
) -> Tool:
    tool = Tool(name=name, description=description)
    db_session.add(tool)
    await db_session.commit()
    return tool


async def create_test_mcp(
    db_session: AsyncSession, name: str = "local-mcp", url: str = "http://mcp.test/mcp"
) -> Mcp:
    mcp = Mcp(name=name, url=url)
    db_session.add(mcp)
    await db_session.commit()
    return mcp


async def create_test_agent(
    db_session: AsyncSession,
    model: Model,
    prompt: Prompt,
    name: str = "support-agent",
    tenant_id: str = "test-tenant",
    parent: Optional[Agent] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Agent:
    agent = Agent(
        tenant_id=tenant_id,
        name=name,
        model_id=model.id,
        prompt_id=prompt.id,
        parent_id=parent.id if parent else None,
        config=config,
    )
    db_session.add(agent)
    await db_session.commit()
    return agent
