from mongoengine import BooleanField, DateField, ReferenceField, StringField

from app.models.base import BaseDocument
from app.models.user import User
from app.utils.base import TaskPriority, TaskStatus


class Task(BaseDocument):
    """Task document owned by a single user.

    Fields:
    - title/description (str): required, non-empty
    - due_date (date|None)
    - priority (str): Low/Medium/High
    - status (str): Pending/In Progress/Completed
    - completed (bool)
    - user (Ref[User]): owner, set at creation only
    """
    title = StringField(required=True, null=False, min_length=1)
    description = StringField(required=True, null=False, min_length=1)
    due_date = DateField(required=False, null=True)
    priority = StringField(required=True, null=False, default=TaskPriority.LOW.value, choices=TaskPriority.choices())
    status = StringField(required=True, null=False, default=TaskStatus.PENDING.value, choices=TaskStatus.choices())
    completed = BooleanField(required=True, null=False, default=False)
    user = ReferenceField(document_type=User, required=True, null=False)

    meta = {
        "collection": "tasks",
        "indexes": [
            {"fields": ["user", "created_at"]},
        ],
    }
