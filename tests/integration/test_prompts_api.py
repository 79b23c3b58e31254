"""
Integration tests for the /api/prompts endpoints.
"""
import uuid

import pytest

from tests.fixtures.helpers import create_test_label, create_test_prompt


@pytest.mark.asyncio
async def test_create_prompt_creates_first_version(client, db_session):
    label = await create_test_label(db_session)

    resp = await client.post(
        "/api/prompts",
        json={
            "name": "Support assistant",
            "description": "Answers support questions",
            "content": "You are a helpful support assistant.",
            "promptLabelId": str(label.id),
        },
    )
    assert resp.status_code == 201
    prompt = resp.json()
    assert prompt["name"] == "Support assistant"
    assert len(prompt["versions"]) == 1
    version = prompt["versions"][0]
    assert version["version"] == 1
    assert version["content"] == "You are a helpful support assistant."
    assert version["label"]["name"] == "production"

    resp = await client.get(f"/api/prompts/{prompt['id']}")
    assert resp.status_code == 200
    assert resp.json()["versions"][0]["id"] == version["id"]


@pytest.mark.asyncio
async def test_create_prompt_requires_content(client):
    resp = await client.post("/api/prompts", json={"name": "Support assistant", "content": ""})
    assert resp.status_code == 400
    assert resp.json()["details"] == [
        {"path": ["content"], "message": "Content is required", "code": "content_required"}
    ]


@pytest.mark.asyncio
async def test_duplicate_prompt_name(client):
    payload = {"name": "Support assistant", "content": "Hello"}
    assert (await client.post("/api/prompts", json=payload)).status_code == 201

    resp = await client.post("/api/prompts", json=payload)
    assert resp.status_code == 409
    assert resp.json() == {"error": "A prompt with this name already exists"}


@pytest.mark.asyncio
async def test_unknown_label_on_create(client):
    resp = await client.post(
        "/api/prompts",
        json={"name": "Support", "content": "Hello", "promptLabelId": str(uuid.uuid4())},
    )
    assert resp.status_code == 422
    assert resp.json() == {"error": "Invalid reference"}


@pytest.mark.asyncio
async def test_list_prompts_newest_first(client, db_session):
    older = await create_test_prompt(db_session, name="Older")
    newer = await create_test_prompt(db_session, name="Newer", contents=["a", "b"])

    resp = await client.get("/api/prompts")
    assert resp.status_code == 200
    prompts = resp.json()
    assert [p["id"] for p in prompts] == [str(newer.id), str(older.id)]
    assert [v["version"] for v in prompts[0]["versions"]] == [2, 1]


@pytest.mark.asyncio
async def test_update_prompt(client, db_session):
    prompt = await create_test_prompt(db_session, description="Original")

    resp = await client.put(f"/api/prompts/{prompt.id}", json={"name": "Renamed"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert resp.json()["description"] == "Original"

    resp = await client.put(f"/api/prompts/{uuid.uuid4()}", json={"name": "Renamed"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_versions_filtered_by_label(client, db_session):
    label = await create_test_label(db_session)
    prompt = await create_test_prompt(db_session, contents=["v1", "v2", "v3"])

    versions = (await client.get(f"/api/prompts/{prompt.id}/versions")).json()
    assert [v["version"] for v in versions] == [3, 2, 1]

    v2 = next(v for v in versions if v["version"] == 2)
    resp = await client.put(f"/api/prompt-versions/{v2['id']}", json={"labelId": str(label.id)})
    assert resp.status_code == 200

    resp = await client.get(f"/api/prompts/{prompt.id}/versions", params={"labelId": str(label.id)})
    assert [v["version"] for v in resp.json()] == [2]

    resp = await client.get(f"/api/prompts/{prompt.id}/versions", params={"labelId": "none"})
    assert [v["version"] for v in resp.json()] == [3, 1]


@pytest.mark.asyncio
async def test_list_versions_invalid_label(client, db_session):
    prompt = await create_test_prompt(db_session)

    resp = await client.get(f"/api/prompts/{prompt.id}/versions", params={"labelId": "abc"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid label ID"}

    resp = await client.get(f"/api/prompts/{uuid.uuid4()}/versions")
    assert resp.status_code == 404
