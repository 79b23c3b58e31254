"""
Integration tests for the /api/tools endpoints.
"""
import uuid

import pytest

from tests.fixtures.helpers import create_test_agent, create_test_model, create_test_prompt


@pytest.mark.asyncio
async def test_tool_crud_flow(client):
    """Create, list, retrieve, update and delete a tool."""
    resp = await client.post(
        "/api/tools", json={"name": "web-search", "description": "Search the web"}
    )
    assert resp.status_code == 201
    tool = resp.json()
    assert tool["description"] == "Search the web"

    resp = await client.get("/api/tools")
    assert [t["id"] for t in resp.json()] == [tool["id"]]

    resp = await client.put(f"/api/tools/{tool['id']}", json={"name": "web_search"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "web_search"
    assert resp.json()["description"] is None

    resp = await client.delete(f"/api/tools/{tool['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Tool deleted successfully"}

    resp = await client.get(f"/api/tools/{tool['id']}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "tools.errors.toolNotFound"}


@pytest.mark.asyncio
async def test_delete_missing_tool(client):
    resp = await client.delete(f"/api/tools/{uuid.uuid4()}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_description_too_long(client):
    resp = await client.post("/api/tools", json={"name": "web-search", "description": "x" * 501})
    assert resp.status_code == 400
    issue = resp.json()["details"][0]
    assert issue["path"] == ["description"]
    assert issue["message"] == "Description must be 500 characters or less"


@pytest.mark.asyncio
async def test_deleting_tool_removes_it_from_agents(client, db_session):
    model = await create_test_model(db_session)
    prompt = await create_test_prompt(db_session)
    agent = await create_test_agent(db_session, model, prompt)

    tool = (await client.post("/api/tools", json={"name": "web-search"})).json()
    resp = await client.put(
        f"/api/agents/{agent.id}",
        json={
            "name": agent.name,
            "modelId": str(model.id),
            "promptId": str(prompt.id),
            "tools": [tool["id"]],
        },
    )
    assert [link["toolId"] for link in resp.json()["tools"]] == [tool["id"]]

    await client.delete(f"/api/tools/{tool['id']}")

    resp = await client.get(f"/api/agents/{agent.id}")
    assert resp.json()["tools"] == []
