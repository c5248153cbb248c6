from enum import Enum


class BaseEnum(Enum):
    @classmethod
    def choices(cls):
        return [(item.value, item.name) for item in cls]


class Role(BaseEnum):
    USER = "user"
    ADMIN = "admin"
    CREATOR = "creator"


class TaskPriority(BaseEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(BaseEnum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TokenPurpose(BaseEnum):
    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"
