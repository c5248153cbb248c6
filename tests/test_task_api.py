"""Tests for task CRUD and ownership isolation."""

from bson.objectid import ObjectId

from app.models.task import Task
from tests.conftest import API


def _create(client, headers, **fields):
    payload = {"title": "T", "description": "D", **fields}
    return client.post(f"{API}/task/create", headers=headers, json=payload)


class TestCreateTask:

    def test_defaults(self, client, user, user_headers):
        res = _create(client, user_headers)

        assert res.status_code == 201
        task = res.json()
        assert task["status"] == "Pending"
        assert task["priority"] == "Low"
        assert task["completed"] is False
        assert task["dueDate"] is None
        assert task["user"] == str(user.id)

    def test_all_fields(self, client, user_headers):
        res = _create(client, user_headers, dueDate="2025-02-28", priority="High", status="In Progress")

        assert res.status_code == 201
        task = res.json()
        assert task["dueDate"] == "2025-02-28"
        assert task["priority"] == "High"
        assert task["status"] == "In Progress"

    def test_blank_title(self, client, user_headers):
        res = _create(client, user_headers, title="   ")

        assert res.status_code == 400
        assert res.json() == {"message": "Title is required!"}

    def test_blank_description(self, client, user_headers):
        assert _create(client, user_headers, description="").status_code == 400

    def test_missing_title(self, client, user_headers):
        res = client.post(f"{API}/task/create", headers=user_headers, json={"description": "D"})
        assert res.status_code == 400

    def test_unknown_priority(self, client, user_headers):
        assert _create(client, user_headers, priority="Urgent").status_code == 400

    def test_requires_session(self, client):
        assert _create(client, {}).status_code == 401
        assert Task.objects.count() == 0


class TestListTasks:

    def test_lists_only_own_tasks(self, client, user_headers, other_headers):
        _create(client, user_headers, title="mine 1")
        _create(client, user_headers, title="mine 2")
        _create(client, other_headers, title="theirs")

        body = client.get(f"{API}/tasks", headers=user_headers).json()

        assert body["length"] == 2
        assert {t["title"] for t in body["tasks"]} == {"mine 1", "mine 2"}

    def test_empty(self, client, user_headers):
        assert client.get(f"{API}/tasks", headers=user_headers).json() == {"length": 0, "tasks": []}


class TestSingleTask:

    def test_get(self, client, user_headers):
        task_id = _create(client, user_headers).json()["id"]
        res = client.get(f"{API}/task/{task_id}", headers=user_headers)

        assert res.status_code == 200
        assert res.json()["id"] == task_id

    def test_malformed_id(self, client, user_headers):
        assert client.get(f"{API}/task/not-an-id", headers=user_headers).status_code == 400

    def test_missing_task(self, client, user_headers):
        res = client.get(f"{API}/task/{ObjectId()}", headers=user_headers)

        assert res.status_code == 404
        assert res.json() == {"message": "Task not found!"}

    def test_partial_update_keeps_omitted_fields(self, client, user_headers):
        task_id = _create(client, user_headers, priority="Medium", dueDate="2025-03-05").json()["id"]

        res = client.patch(f"{API}/task/{task_id}", headers=user_headers, json={"status": "Completed", "completed": True})

        assert res.status_code == 200
        task = res.json()
        assert task["status"] == "Completed"
        assert task["completed"] is True
        assert task["title"] == "T"
        assert task["description"] == "D"
        assert task["priority"] == "Medium"
        assert task["dueDate"] == "2025-03-05"

    def test_update_cannot_blank_title(self, client, user_headers):
        task_id = _create(client, user_headers).json()["id"]
        res = client.patch(f"{API}/task/{task_id}", headers=user_headers, json={"title": ""})

        assert res.status_code == 400
        assert Task.objects(id=task_id).first().title == "T"

    def test_update_cannot_change_owner(self, client, user, other_user, user_headers):
        task_id = _create(client, user_headers).json()["id"]
        res = client.patch(f"{API}/task/{task_id}", headers=user_headers, json={"user": str(other_user.id), "title": "X"})

        assert res.status_code == 200
        assert res.json()["user"] == str(user.id)
        assert Task.objects(id=task_id).first().user.id == user.id

    def test_clear_due_date(self, client, user_headers):
        task_id = _create(client, user_headers, dueDate="2025-03-05").json()["id"]
        res = client.patch(f"{API}/task/{task_id}", headers=user_headers, json={"dueDate": None})

        assert res.json()["dueDate"] is None

    def test_delete(self, client, user_headers):
        task_id = _create(client, user_headers).json()["id"]
        res = client.delete(f"{API}/task/{task_id}", headers=user_headers)

        assert res.status_code == 200
        assert res.json() == {"message": "Task deleted successfully!"}
        assert Task.objects(id=task_id).count() == 0
        assert client.get(f"{API}/task/{task_id}", headers=user_headers).status_code == 404


class TestOwnershipIsolation:

    def test_other_user_cannot_touch_task(self, client, user_headers, other_headers):
        task_id = _create(client, user_headers).json()["id"]

        assert client.get(f"{API}/task/{task_id}", headers=other_headers).status_code == 403
        assert client.patch(f"{API}/task/{task_id}", headers=other_headers, json={"title": "hijack"}).status_code == 403
        assert client.delete(f"{API}/task/{task_id}", headers=other_headers).status_code == 403
        assert client.get(f"{API}/tasks", headers=other_headers).json()["length"] == 0

        task = Task.objects(id=task_id).first()
        assert task is not None
        assert task.title == "T"


def test_register_login_create_and_foreign_delete(client):
    res = client.post(f"{API}/register", json={"name": "A", "email": "a@x.com", "password": "p1"})
    assert res.status_code == 201
    assert res.json()["isVerified"] is False

    res = client.post(f"{API}/login", json={"email": "a@x.com", "password": "p1"})
    assert res.status_code == 200
    assert "token" in res.cookies

    # Cookie session from the login above
    res = client.post(f"{API}/task/create", json={"title": "T", "description": "D"})
    assert res.status_code == 201
    task = res.json()
    assert task["status"] == "Pending"
    assert task["priority"] == "Low"

    client.cookies.clear()
    other = client.post(f"{API}/register", json={"name": "B", "email": "b@x.com", "password": "p2"}).json()
    client.cookies.clear()

    res = client.delete(f"{API}/task/{task['id']}", headers={"Authorization": f"Bearer {other['token']}"})
    assert res.status_code in (401, 403)
    assert Task.objects(id=task["id"]).count() == 1
