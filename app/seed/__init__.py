from __future__ import annotations

import logging

from app.models.user import User
from app.services.auth import hash_password
from app.services.users import UserStore
from app.utils.base import Role
from app.utils.config import settings


logger = logging.getLogger(__name__)


def ensure_user(store: UserStore, name: str, email: str, password: str, role: Role) -> User:
    """Create the account if missing, otherwise make sure it holds ``role``."""
    user = store.get_by_email(email)
    if not user:
        user = store.create(
            name=name,
            email=email.lower(),
            password=hash_password(password),
            role=role.value,
            is_verified=True,
        )
        logger.info("Created %s account %s", role.value, email)
    elif user.role != role.value:
        user.role = role.value
        store.save(user)
        logger.info("Promoted %s to %s", email, role.value)
    return user


def seed_privileged_users(store: UserStore | None = None) -> list[User]:
    store = store or UserStore()
    return [
        ensure_user(store, "Admin", settings.seed_admin_email, settings.seed_admin_password, Role.ADMIN),
        ensure_user(store, "Creator", settings.seed_creator_email, settings.seed_creator_password, Role.CREATOR),
    ]
