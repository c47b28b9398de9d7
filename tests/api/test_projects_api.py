"""Projects and tasks over HTTP.

Tests cover:
    - Identity headers required (401), malformed headers rejected
    - Status codes: 201 create, 204 delete, 400 validation, 403, 404, 409
    - Error body shape: {"error": {"code", "message", ...}}
    - Task filters as query parameters, comment endpoints
"""

from uuid import uuid4

import pytest

from tests.api.helpers import headers_for


@pytest.fixture
async def launch(client, people):
    res = await client.post(
        "/api/v1/projects",
        json={"name": "Launch", "team_member_ids": [str(people.alice.id)]},
        headers=headers_for(people.lead),
    )
    assert res.status_code == 201
    return res.json()


# ─── Identity ────────────────────────────────────────────────────

async def test_missing_identity_is_401(client):
    res = await client.get("/api/v1/projects")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "NOT_AUTHENTICATED"


async def test_malformed_identity_is_401(client):
    res = await client.get(
        "/api/v1/projects",
        headers={"X-Principal-Id": "not-a-uuid", "X-Principal-Role": "admin"},
    )
    assert res.status_code == 401


# ─── Projects ────────────────────────────────────────────────────

async def test_create_project_returns_view(launch, people):
    assert launch["name"] == "Launch"
    assert launch["lead_manager_id"] == str(people.lead.id)
    assert set(launch["team_member_ids"]) == {str(people.lead.id), str(people.alice.id)}
    assert launch["progress"] == 0.0


async def test_user_role_create_is_403(client, people):
    res = await client.post(
        "/api/v1/projects", json={"name": "Nope"}, headers=headers_for(people.alice),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_blank_name_is_400(client, people):
    res = await client.post(
        "/api/v1/projects", json={"name": "   "}, headers=headers_for(people.lead),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"


async def test_duplicate_name_is_409(client, people, launch):
    res = await client.post(
        "/api/v1/projects", json={"name": "Launch"}, headers=headers_for(people.other_manager),
    )
    assert res.status_code == 409


async def test_unknown_project_is_404(client, people):
    res = await client.get(f"/api/v1/projects/{uuid4()}", headers=headers_for(people.admin))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


async def test_list_projects_for_member(client, people, launch):
    res = await client.get("/api/v1/projects", headers=headers_for(people.alice))
    assert [p["id"] for p in res.json()] == [launch["id"]]
    res = await client.get("/api/v1/projects", headers=headers_for(people.bob))
    assert res.json() == []


async def test_patch_project_roster(client, people, launch):
    res = await client.patch(
        f"/api/v1/projects/{launch['id']}",
        json={"team_member_ids": [str(people.bob.id)]},
        headers=headers_for(people.lead),
    )
    assert res.status_code == 200
    assert set(res.json()["team_member_ids"]) == {str(people.lead.id), str(people.bob.id)}


async def test_delete_project(client, people, launch):
    res = await client.delete(
        f"/api/v1/projects/{launch['id']}", headers=headers_for(people.alice),
    )
    assert res.status_code == 403

    res = await client.delete(
        f"/api/v1/projects/{launch['id']}", headers=headers_for(people.lead),
    )
    assert res.status_code == 204
    res = await client.get(
        f"/api/v1/projects/{launch['id']}", headers=headers_for(people.lead),
    )
    assert res.status_code == 404


# ─── Tasks ───────────────────────────────────────────────────────

async def _create_task(client, person, project_id, **body):
    res = await client.post(
        f"/api/v1/projects/{project_id}/tasks", json=body, headers=headers_for(person),
    )
    assert res.status_code == 201, res.text
    return res.json()


async def test_completion_gate_over_http(client, people, launch):
    t1 = await _create_task(client, people.lead, launch["id"], title="T1")
    t2 = await _create_task(
        client, people.lead, launch["id"], title="T2", dependency_ids=[t1["id"]],
    )

    res = await client.patch(
        f"/api/v1/tasks/{t2['id']}", json={"status": "completed"},
        headers=headers_for(people.lead),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DEPENDENCY_NOT_SATISFIED"
    assert res.json()["error"]["details"] == [{"id": t1["id"], "status": "pending"}]

    await client.patch(
        f"/api/v1/tasks/{t1['id']}", json={"status": "completed"},
        headers=headers_for(people.lead),
    )
    res = await client.patch(
        f"/api/v1/tasks/{t2['id']}", json={"status": "completed"},
        headers=headers_for(people.lead),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "completed"


async def test_linked_tasks_update_and_list(client, people, launch):
    t1 = await _create_task(client, people.lead, launch["id"], title="T1")
    t2 = await _create_task(
        client, people.lead, launch["id"], title="T2", dependency_ids=[t1["id"]],
    )

    res = await client.patch(
        f"/api/v1/tasks/{t1['id']}", json={"priority": "high"},
        headers=headers_for(people.lead),
    )
    assert res.status_code == 200
    assert res.json()["priority"] == "high"

    res = await client.get(
        f"/api/v1/projects/{launch['id']}/tasks",
        params={"sort_by": "title", "order": "asc"}, headers=headers_for(people.alice),
    )
    assert res.status_code == 200
    assert [(t["id"], t["dependency_ids"]) for t in res.json()] == [
        (t1["id"], []), (t2["id"], [t1["id"]]),
    ]


async def test_self_dependency_is_400(client, people, launch):
    t1 = await _create_task(client, people.lead, launch["id"], title="T1")
    res = await client.patch(
        f"/api/v1/tasks/{t1['id']}", json={"dependency_ids": [t1["id"]]},
        headers=headers_for(people.lead),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SELF_DEPENDENCY"


async def test_null_assignee_unassigns(client, people, launch):
    task = await _create_task(
        client, people.lead, launch["id"], title="Docs", assignee_id=str(people.alice.id),
    )
    res = await client.patch(
        f"/api/v1/tasks/{task['id']}", json={"assignee_id": None},
        headers=headers_for(people.lead),
    )
    assert res.json()["assignee_id"] is None
    assert res.json()["title"] == "Docs"


async def test_task_list_filters(client, people, launch):
    await _create_task(client, people.lead, launch["id"], title="B", priority="high")
    await _create_task(client, people.lead, launch["id"], title="A", priority="high")
    await _create_task(client, people.lead, launch["id"], title="C", status="inProgress")

    res = await client.get(
        f"/api/v1/projects/{launch['id']}/tasks",
        params={"priority": "high", "sort_by": "title", "order": "asc"},
        headers=headers_for(people.alice),
    )
    assert [t["title"] for t in res.json()] == ["A", "B"]

    res = await client.get(
        f"/api/v1/projects/{launch['id']}/tasks",
        params={"status": "inProgress"}, headers=headers_for(people.alice),
    )
    assert [t["title"] for t in res.json()] == ["C"]


async def test_bad_filter_is_400(client, people, launch):
    res = await client.get(
        f"/api/v1/projects/{launch['id']}/tasks",
        params={"sort_by": "id; drop table"}, headers=headers_for(people.lead),
    )
    assert res.status_code == 400
    res = await client.get(
        f"/api/v1/projects/{launch['id']}/tasks",
        params={"due_date": "tomorrow"}, headers=headers_for(people.lead),
    )
    assert res.status_code == 400


async def test_outsider_cannot_read_task(client, people, launch):
    task = await _create_task(client, people.lead, launch["id"], title="Secret")
    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=headers_for(people.carol))
    assert res.status_code == 403


async def test_comment_lifecycle(client, people, launch):
    task = await _create_task(client, people.lead, launch["id"], title="Docs")
    res = await client.post(
        f"/api/v1/tasks/{task['id']}/comments", json={"text": "On it"},
        headers=headers_for(people.alice),
    )
    assert res.status_code == 201
    comment = res.json()
    assert comment["author_id"] == str(people.alice.id)

    res = await client.post(
        f"/api/v1/tasks/{task['id']}/comments", json={"text": "  "},
        headers=headers_for(people.alice),
    )
    assert res.status_code == 400

    res = await client.delete(
        f"/api/v1/tasks/{task['id']}/comments/{comment['id']}",
        headers=headers_for(people.alice),
    )
    assert res.status_code == 204
    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=headers_for(people.lead))
    assert res.json()["comments"] == []


async def test_delete_task(client, people, launch):
    task = await _create_task(client, people.lead, launch["id"], title="Docs")
    res = await client.delete(f"/api/v1/tasks/{task['id']}", headers=headers_for(people.lead))
    assert res.status_code == 204
    res = await client.get(f"/api/v1/tasks/{task['id']}", headers=headers_for(people.lead))
    assert res.status_code == 404
