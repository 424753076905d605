"""
Task Tests
==========

Task CRUD, completion stamps, ordering and owner scoping.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient

from tests.conftest import (
    create_client_record,
    create_project_record,
    create_task_record,
    register,
)


@pytest_asyncio.fixture
async def project(auth_client: AsyncClient) -> dict:
    acme = await create_client_record(auth_client)
    return await create_project_record(auth_client, acme["id"])


@pytest.mark.asyncio
async def test_create_defaults(auth_client: AsyncClient, project: dict):
    task = await create_task_record(auth_client, project["id"], "  Wireframes ", importance=None)

    assert task["name"] == "Wireframes"
    assert task["importance"] == 3
    assert task["statusId"] == 1
    assert task["completedAt"] is None


@pytest.mark.asyncio
async def test_name_is_required(auth_client: AsyncClient, project: dict):
    response = await auth_client.post(
        f"/api/v1/projects/{project['id']}/tasks",
        json={"name": " "},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Task name is required"


@pytest.mark.asyncio
@pytest.mark.parametrize("importance", [0, 6])
async def test_importance_out_of_range(auth_client: AsyncClient, project: dict, importance: int):
    response = await auth_client.post(
        f"/api/v1/projects/{project['id']}/tasks",
        json={"name": "Logo", "importance": importance},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Importance must be between 1 and 5"


@pytest.mark.asyncio
@pytest.mark.parametrize("importance", [0, 6])
async def test_update_rejects_importance_out_of_range(
    auth_client: AsyncClient, project: dict, importance: int
):
    task = await create_task_record(auth_client, project["id"], importance=5)

    response = await auth_client.patch(f"/api/v1/tasks/{task['id']}", json={"importance": importance})

    assert response.status_code == 400
    assert response.json()["error"]["field"] == "importance"
    stored = await auth_client.get(f"/api/v1/tasks/{task['id']}")
    assert stored.json()["data"]["importance"] == 5


@pytest.mark.asyncio
async def test_update_rejects_null_importance(auth_client: AsyncClient, project: dict):
    task = await create_task_record(auth_client, project["id"], importance=4)

    response = await auth_client.patch(f"/api/v1/tasks/{task['id']}", json={"importance": None})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Importance is required"


@pytest.mark.asyncio
async def test_complete_and_reopen(auth_client: AsyncClient, project: dict):
    task = await create_task_record(auth_client, project["id"])

    completed = await auth_client.post(f"/api/v1/tasks/{task['id']}/complete")
    assert completed.json()["data"]["statusId"] == 4
    assert completed.json()["data"]["completedAt"] is not None

    reopened = await auth_client.post(f"/api/v1/tasks/{task['id']}/reopen")
    assert reopened.json()["data"]["statusId"] == 2
    assert reopened.json()["data"]["completedAt"] is None


@pytest.mark.asyncio
async def test_status_update_keeps_completion_stamp_in_step(auth_client: AsyncClient, project: dict):
    task = await create_task_record(auth_client, project["id"])

    done = await auth_client.patch(f"/api/v1/tasks/{task['id']}", json={"statusId": 4})
    paused = await auth_client.patch(f"/api/v1/tasks/{task['id']}", json={"statusId": 3})

    assert done.json()["data"]["completedAt"] is not None
    assert paused.json()["data"]["completedAt"] is None


@pytest.mark.asyncio
async def test_list_order(auth_client: AsyncClient, project: dict):
    await create_task_record(auth_client, project["id"], "Low", importance=1)
    await create_task_record(auth_client, project["id"], "Later", importance=5, dueDate="2026-09-01")
    await create_task_record(auth_client, project["id"], "Sooner", importance=5, dueDate="2026-08-01")
    started = await create_task_record(auth_client, project["id"], "Started", importance=5)
    await auth_client.patch(f"/api/v1/tasks/{started['id']}", json={"statusId": 2})

    response = await auth_client.get(f"/api/v1/projects/{project['id']}/tasks")

    assert [t["name"] for t in response.json()["data"]] == ["Sooner", "Later", "Low", "Started"]


@pytest.mark.asyncio
async def test_delete_task(auth_client: AsyncClient, project: dict):
    task = await create_task_record(auth_client, project["id"])

    response = await auth_client.delete(f"/api/v1/tasks/{task['id']}")

    assert response.json()["data"]["projectId"] == project["id"]
    assert (await auth_client.get(f"/api/v1/tasks/{task['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_statuses_catalog(auth_client: AsyncClient):
    response = await auth_client.get("/api/v1/tasks/statuses")

    names = [s["name"] for s in response.json()["data"]]
    assert names[3] == "Completed"
    assert len(names) == 5


@pytest.mark.asyncio
async def test_other_profile_cannot_touch_task(auth_client: AsyncClient, project: dict):
    task = await create_task_record(auth_client, project["id"])
    auth_client.cookies.clear()
    await register(auth_client, email="bo@example.com", display_name="Bo")

    assert (await auth_client.get(f"/api/v1/tasks/{task['id']}")).status_code == 404
    assert (await auth_client.post(f"/api/v1/tasks/{task['id']}/complete")).status_code == 404
    assert (
        await auth_client.post(f"/api/v1/projects/{project['id']}/tasks", json={"name": "Sneaky"})
    ).status_code == 404


@pytest.mark.asyncio
async def test_unknown_task(auth_client: AsyncClient):
    response = await auth_client.get(f"/api/v1/tasks/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Task not found"
