from typing import Any

from bson.objectid import ObjectId

from app.models.task import Task
from app.models.user import User


# Fields a client may change after creation; the owner is not one of them
UPDATABLE_FIELDS = ("title", "description", "due_date", "priority", "status", "completed")


class TaskStore:
    """Access to task documents, always scoped by owner for listings."""

    def create(self, owner: User, **fields) -> Task:
        task = Task(user=owner, **fields)
        task.save()
        return task

    def get(self, task_id: str) -> Task | None:
        if not ObjectId.is_valid(task_id):
            return None
        return Task.objects(id=task_id).first()

    def list_for(self, owner: User) -> list[Task]:
        return list(Task.objects(user=owner).order_by("-created_at"))

    def update(self, task: Task, changes: dict[str, Any]) -> Task:
        for field, value in changes.items():
            if field in UPDATABLE_FIELDS:
                setattr(task, field, value)
        task.save()
        return task

    def delete(self, task: Task) -> None:
        task.delete()

    def delete_for(self, owner: User) -> int:
        return Task.objects(user=owner).delete()


def get_task_store() -> TaskStore:
    return TaskStore()
