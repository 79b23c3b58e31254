"""
Integration tests for the /api/agents endpoints.
"""
import uuid

import pytest

from tests.fixtures.helpers import (
    create_test_agent,
    create_test_label,
    create_test_mcp,
    create_test_model,
    create_test_prompt,
    create_test_tool,
)


@pytest.fixture
def agent_payload():
    def build(model, prompt, **extra):
        return {
            "name": "support-agent",
            "modelId": str(model.id),
            "promptId": str(prompt.id),
            **extra,
        }

    return build


@pytest.mark.asyncio
async def test_create_agent(client, db_session, agent_payload, tenant_id):
    model = await create_test_model(db_session)
    prompt = await create_test_prompt(db_session)
    label = await create_test_label(db_session)
    mcp = await create_test_mcp(db_session)
    tool = await create_test_tool(db_session)

    resp = await client.post(
        "/api/agents",
        json=agent_payload(
            model,
            prompt,
            description="Handles support tickets",
            labelId=str(label.id),
            config={"temperature": 0.2, "maxTokens": 1024},
            mcpTools=[f"{mcp.id}:search"],
            tools=[str(tool.id)],
        ),
    )
    assert resp.status_code == 201
    agent = resp.json()
    assert agent["tenantId"] == tenant_id
    assert agent["model"]["name"] == "gpt-4o"
    assert agent["prompt"]["id"] == str(prompt.id)
    assert agent["label"]["name"] == "production"
    assert agent["config"] == {"temperature": 0.2, "maxTokens": 1024}
    assert agent["mcpTools"][0]["toolName"] == "search"
    assert agent["mcpTools"][0]["mcp"]["id"] == str(mcp.id)
    assert agent["tools"][0]["tool"]["name"] == "web-search"
    assert agent["subAgents"] == []
    assert agent["parent"] is None


@pytest.mark.asyncio
async def test_list_agents_omits_tools(client, db_session):
    model = await create_test_model(db_session)
    prompt = await create_test_prompt(db_session)
    await create_test_agent(db_session, model, prompt)
    await create_test_agent(db_session, model, prompt, name="elsewhere", tenant_id="other-tenant")

    resp = await client.get("/api/agents")
    assert resp.status_code == 200
    agents = resp.json()
    assert [a["name"] for a in agents] == ["support-agent"]
    assert "tools" not in agents[0]
    assert agents[0]["model"]["provider"] == "OPENAI"


@pytest.mark.asyncio
async def test_agent_validation(client):
    resp = await client.post(
        "/api/agents",
        json={
            "name": "support-agent",
            "modelId": "",
            "promptId": "",
            "config": {"temperature": 3},
            "mcpTools": ["no-separator"],
        },
    )
    assert resp.status_code == 400
    messages = {tuple(issue["path"]): issue["message"] for issue in resp.json()["details"]}
    assert messages[("modelId",)] == "Model is required"
    assert messages[("promptId",)] == "Prompt is required"
    assert ("config", "temperature") in messages
    assert messages[("mcpTools", 0)] == "MCP tools must use the format <mcpId>:<toolName>"


@pytest.mark.asyncio
async def test_invalid_references(client, db_session, agent_payload):
    model = await create_test_model(db_session)
    prompt = await create_test_prompt(db_session)

    for extra in (
        {"modelId": str(uuid.uuid4())},
        {"tools": ["not-a-uuid"]},
        {"mcpTools": [f"{uuid.uuid4()}:search"]},
    ):
        resp = await client.post("/api/agents", json=agent_payload(model, prompt, **extra))
        assert resp.status_code == 422
        assert resp.json() == {"error": "Invalid reference"}


@pytest.mark.asyncio
async def test_update_agent_hierarchy(client, db_session, agent_payload):
    model = await create_test_model(db_session)
    prompt = await create_test_prompt(db_session)
    parent = await create_test_agent(db_session, model, prompt, name="router")
    child = await create_test_agent(db_session, model, prompt, name="billing")

    resp = await client.put(
        f"/api/agents/{parent.id}",
        json=agent_payload(model, prompt, name="router", subAgents=[str(child.id)]),
    )
    assert resp.status_code == 200
    assert [sub["id"] for sub in resp.json()["subAgents"]] == [str(child.id)]

    resp = await client.get(f"/api/agents/{child.id}")
    assert resp.json()["parent"]["id"] == str(parent.id)
    assert resp.json()["parentId"] == str(parent.id)

    resp = await client.put(
        f"/api/agents/{child.id}",
        json=agent_payload(model, prompt, name="billing", subAgents=[str(parent.id)]),
    )
    assert resp.status_code == 422
    assert resp.json() == {"error": "A sub-agent cannot be an ancestor of the agent"}

    resp = await client.put(
        f"/api/agents/{child.id}",
        json=agent_payload(model, prompt, name="billing", subAgents=[str(child.id)]),
    )
    assert resp.status_code == 422
    assert resp.json() == {"error": "An agent cannot be its own sub-agent"}


@pytest.mark.asyncio
async def test_agent_of_other_tenant_is_not_found(client, db_session, agent_payload):
    model = await create_test_model(db_session)
    prompt = await create_test_prompt(db_session)
    agent = await create_test_agent(db_session, model, prompt, tenant_id="other-tenant")

    resp = await client.get(f"/api/agents/{agent.id}")
    assert resp.status_code == 404

    resp = await client.put(f"/api/agents/{agent.id}", json=agent_payload(model, prompt))
    assert resp.status_code == 404
