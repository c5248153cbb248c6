import logging

from bson.objectid import ObjectId
from mongoengine import NotUniqueError

from app.models.user import User


logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    pass


class UserStore:
    """Access to user documents on the default mongoengine connection."""

    def create(self, **fields) -> User:
        user = User(**fields)
        try:
            user.save()
        except NotUniqueError as exc:
            raise DuplicateEmailError(fields.get("email")) from exc
        return user

    def get(self, user_id: str) -> User | None:
        if not ObjectId.is_valid(user_id):
            return None
        return User.objects(id=user_id).first()

    def get_by_email(self, email: str) -> User | None:
        return User.objects(email=email.lower()).first()

    def find_one(self, **filters) -> User | None:
        return User.objects(**filters).first()

    def list(self) -> list[User]:
        return list(User.objects.order_by("-created_at"))

    def save(self, user: User) -> User:
        user.save()
        return user

    def delete(self, user: User) -> None:
        user.delete()
        logger.info("Deleted user %s", user.id)


def get_user_store() -> UserStore:
    return UserStore()
