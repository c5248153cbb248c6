from app.utils.base.enums import BaseEnum, Role, TaskPriority, TaskStatus, TokenPurpose
from app.utils.base.schema import CamelModel

__all__ = ["BaseEnum", "Role", "TaskPriority", "TaskStatus", "TokenPurpose", "CamelModel"]
