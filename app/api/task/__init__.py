from datetime import date

from bson.objectid import ObjectId
from fastapi import APIRouter, HTTPException, Depends

from app.models.task import Task
from app.models.user import User
from app.services.auth.dependencies import get_current_user
from app.services.tasks import TaskStore, get_task_store
from app.utils.base import CamelModel, TaskPriority, TaskStatus


router = APIRouter(tags=["Tasks"])


def _get_owned_task(task_id: str, current_user: User, store: TaskStore) -> Task:
    """Resolve a task by id, enforcing that the current user owns it."""
    if not task_id or not ObjectId.is_valid(task_id):
        raise HTTPException(status_code=400, detail="Please provide a valid task id")
    task = store.get(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found!")
    if task.user.id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized!")
    return task


class CreateTaskBody(CamelModel):
    title: str
    description: str
    due_date: date | None = None
    priority: TaskPriority = TaskPriority.LOW
    status: TaskStatus = TaskStatus.PENDING
    completed: bool = False

@router.post("/task/create", status_code=201)
def create_task(
    body: CreateTaskBody,
    current_user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
) -> dict:
    """PROTECTED: Create a task owned by the current user."""
    if not body.title.strip():
        raise HTTPException(status_code=400, detail="Title is required!")
    if not body.description.strip():
        raise HTTPException(status_code=400, detail="Description is required!")

    task = store.create(
        current_user,
        title=body.title,
        description=body.description,
        due_date=body.due_date,
        priority=body.priority.value,
        status=body.status.value,
        completed=body.completed,
    )
    return task.to_output()


@router.get("/tasks")
def list_tasks(
    current_user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
) -> dict:
    tasks = store.list_for(current_user)
    return {"length": len(tasks), "tasks": [t.to_output() for t in tasks]}


@router.get("/task/{task_id}")
def get_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
) -> dict:
    return _get_owned_task(task_id, current_user, store).to_output()


class UpdateTaskBody(CamelModel):
    title: str | None = None
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    completed: bool | None = None

@router.patch("/task/{task_id}")
def update_task(
    task_id: str,
    body: UpdateTaskBody,
    current_user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
) -> dict:
    """PROTECTED: Partial update; only fields present in the body change."""
    task = _get_owned_task(task_id, current_user, store)

    changes = {}
    for field, value in body.model_dump(exclude_unset=True).items():
        if field in ("title", "description"):
            if value is None or not value.strip():
                raise HTTPException(status_code=400, detail=f"{field.capitalize()} cannot be empty!")
        elif value is None and field != "due_date":
            # Only the due date may be cleared explicitly
            continue
        changes[field] = value.value if isinstance(value, (TaskPriority, TaskStatus)) else value

    return store.update(task, changes).to_output()


@router.delete("/task/{task_id}")
def delete_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
) -> dict:
    task = _get_owned_task(task_id, current_user, store)
    store.delete(task)
    return {"message": "Task deleted successfully!"}
