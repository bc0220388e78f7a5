"""
Tests for todos and projects in personal and group scope
"""

from conftest import bearer
from familyhub.modules.todos.schemas import priority_to_int, priority_to_text, category_to_type


def create_todo(client, user="alice", **fields):
    payload = {"title": "Buy milk", **fields}
    response = client.post("/api/v1/todos", json=payload, headers=bearer(user))
    assert response.status_code == 201, response.json()
    return response.json()


def test_priority_and_category_mapping():
    assert [priority_to_int(p) for p in ("high", "medium", "low", "urgent", None)] == [1, 2, 3, 0, 0]
    assert priority_to_int(2) == 2
    assert [priority_to_text(p) for p in (1, 2, 3, 0, None)] == ["high", "medium", "low", "medium", "medium"]
    assert category_to_type("shopping") == "personal"


def test_create_personal_todo_round_trip(client, db):
    todo = create_todo(client, priority="high", category="work", dueDate="2026-11-01T09:00:00Z")
    assert todo["priority"] == "high"
    assert todo["category"] == "work"
    assert todo["groupId"] is None
    assert todo["completed"] is False
    assert todo["dueDate"].startswith("2026-11-01T09:00:00")

    stored = db.rows("tasks")[0]
    assert stored["priority"] == 1
    assert stored["type"] == "work"

    listed = client.get("/api/v1/todos", headers=bearer("alice")).json()
    assert [t["id"] for t in listed] == [todo["id"]]
    assert client.get("/api/v1/todos", headers=bearer("bob")).json() == []


def test_toggle_twice_restores_state(client):
    todo = create_todo(client)
    url = f"/api/v1/todos/{todo['id']}/toggle"

    done = client.patch(url, headers=bearer("alice")).json()
    assert done["completed"] is True
    assert done["completedAt"] is not None

    reopened = client.patch(url, headers=bearer("alice")).json()
    assert reopened["completed"] is False
    assert reopened["completedAt"] is None


def test_personal_todo_is_private(client):
    todo = create_todo(client)
    response = client.patch(f"/api/v1/todos/{todo['id']}/toggle", headers=bearer("bob"))
    assert response.status_code == 403
    assert client.delete(f"/api/v1/todos/{todo['id']}", headers=bearer("bob")).status_code == 403


def test_group_todo_is_shared_with_members(client, group):
    todo = create_todo(client, category="group", groupId=group["id"])

    listed = client.get("/api/v1/todos", params={"groupId": group["id"]}, headers=bearer("bob")).json()
    assert [t["id"] for t in listed] == [todo["id"]]
    assert client.patch(f"/api/v1/todos/{todo['id']}/toggle", headers=bearer("bob")).status_code == 200

    assert client.get("/api/v1/todos", params={"groupId": group["id"]}, headers=bearer("carol")).status_code == 403
    assert client.patch(f"/api/v1/todos/{todo['id']}/toggle", headers=bearer("carol")).status_code == 403


def test_group_category_requires_group_id(client):
    response = client.post("/api/v1/todos", json={"title": "Chores", "category": "group"}, headers=bearer("alice"))
    assert response.status_code == 400
    assert response.json() == {"error": "groupId is required for group todos"}


def test_missing_title_is_400(client, db):
    assert client.post("/api/v1/todos", json={"title": ""}, headers=bearer("alice")).status_code == 400
    assert db.rows("tasks") == []


def test_category_filter(client):
    create_todo(client, title="Report", category="work")
    create_todo(client, title="Laundry", category="personal")
    listed = client.get("/api/v1/todos", params={"category": "work"}, headers=bearer("alice")).json()
    assert [t["title"] for t in listed] == ["Report"]
    assert len(client.get("/api/v1/todos", params={"category": "all"}, headers=bearer("alice")).json()) == 2


def test_update_todo_fields(client):
    todo = create_todo(client)
    response = client.patch(
        f"/api/v1/todos/{todo['id']}",
        json={"title": "Buy oat milk", "priority": "low", "completed": True},
        headers=bearer("alice"),
    )
    body = response.json()
    assert body["title"] == "Buy oat milk"
    assert body["priority"] == "low"
    assert body["completedAt"] is not None


def test_missing_tasks_table(client, db):
    db.missing_tables.add("tasks")
    assert client.get("/api/v1/todos", headers=bearer("alice")).json() == []

    response = client.post("/api/v1/todos", json={"title": "Anything"}, headers=bearer("alice"))
    assert response.status_code == 503
    assert "Tasks table does not exist" in response.json()["error"]


def test_todo_in_someone_elses_project_is_refused(client, db):
    project = client.post("/api/v1/todos/projects", json={"name": "Garden"}, headers=bearer("bob")).json()
    response = client.post(
        "/api/v1/todos", json={"title": "Weed", "projectId": project["id"]}, headers=bearer("alice")
    )
    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden: Project not found or access denied"}


def test_project_lifecycle_detaches_tasks(client, db):
    project = client.post("/api/v1/todos/projects", json={"name": "Move house"}, headers=bearer("alice")).json()
    assert project["color"] == "#6366f1"
    todo = create_todo(client, title="Pack books", projectId=project["id"])
    assert todo["projectId"] == project["id"]

    renamed = client.patch(
        f"/api/v1/todos/projects/{project['id']}", json={"color": "#ff0000"}, headers=bearer("alice")
    ).json()
    assert renamed["color"] == "#ff0000"
    assert renamed["name"] == "Move house"

    assert client.delete(f"/api/v1/todos/projects/{project['id']}", headers=bearer("alice")).status_code == 204
    assert client.get("/api/v1/todos/projects", headers=bearer("alice")).json() == []
    assert db.rows("tasks")[0]["project_id"] is None
