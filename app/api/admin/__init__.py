import logging

from bson.objectid import ObjectId
from fastapi import APIRouter, HTTPException, Depends

from app.models.user import User
from app.services.auth.dependencies import admin_only, creator_or_admin
from app.services.tasks import TaskStore, get_task_store
from app.services.users import UserStore, get_user_store


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


@router.get("/admin/users")
def get_all_users(
    current_user: User = Depends(creator_or_admin),
    store: UserStore = Depends(get_user_store),
) -> list[dict]:
    """ADMIN | CREATOR: List every user without credentials."""
    return [user.to_output() for user in store.list()]


@router.delete("/admin/users/{user_id}")
def delete_user(
    user_id: str,
    current_user: User = Depends(admin_only),
    users: UserStore = Depends(get_user_store),
    tasks: TaskStore = Depends(get_task_store),
) -> dict:
    """ADMIN: Delete a user together with all tasks they own."""
    if not ObjectId.is_valid(user_id):
        raise HTTPException(status_code=400, detail="Please provide a valid user id")
    user = users.get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    removed = tasks.delete_for(user)
    users.delete(user)
    logger.info("Admin %s deleted user %s and %d tasks", current_user.id, user_id, removed)
    return {"message": "User deleted successfully"}
