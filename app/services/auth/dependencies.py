import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.models.user import User
from app.services.auth import TokenError, decode_session_token, has_required_role
from app.services.users import UserStore, get_user_store
from app.utils.base import Role
from app.utils.config import settings


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

NOT_AUTHORIZED = "Not authorized, please login!"


def get_session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Session token from the Authorization header, falling back to the cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name) or None


def get_current_user(
    token: str | None = Depends(get_session_token),
    store: UserStore = Depends(get_user_store),
) -> User:
    """Auth dependency that validates the session token and returns its user."""
    if not token:
        raise HTTPException(status_code=401, detail=NOT_AUTHORIZED)
    try:
        user_id = decode_session_token(token)
    except TokenError as exc:
        logger.info("Rejected session token: %s", exc)
        raise HTTPException(status_code=401, detail=NOT_AUTHORIZED)

    user = store.get(user_id)
    if not user:
        raise HTTPException(status_code=401, detail=NOT_AUTHORIZED)
    return user


def require_roles(*roles: Role) -> Callable[..., User]:
    """Return a dependency that admits only users holding one of ``roles``."""

    def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_required_role(current_user.role, roles):
            logger.warning("User %s with role %s denied access", current_user.id, current_user.role)
            raise HTTPException(status_code=403, detail="Not authorized for this action")
        return current_user

    return _dependency


admin_only = require_roles(Role.ADMIN)
creator_or_admin = require_roles(Role.ADMIN, Role.CREATOR)
