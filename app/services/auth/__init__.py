import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Iterable

from passlib.context import CryptContext
from jose import jwt, JWTError, ExpiredSignatureError

from app.models.user import User
from app.services.users import UserStore
from app.utils.base import Role, TokenPurpose
from app.utils.config import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)

SESSION_TOKEN_TYPE = "session"

# User fields holding the digest and expiry of each kind of one-time token
_ONE_TIME_TOKEN_FIELDS = {
    TokenPurpose.VERIFICATION: ("verification_token", "verification_token_expires_at"),
    TokenPurpose.PASSWORD_RESET: ("reset_password_token", "reset_password_token_expires_at"),
}


class TokenError(Exception):
    """Base class for session and one-time token failures."""


class InvalidTokenError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class TokenMismatchError(TokenError):
    pass


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def create_session_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed session JWT carrying the user id, issue time and expiry."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.session_token_expires_minutes)
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "typ": SESSION_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> str:
    """Return the user id of a session token.

    Raises ExpiredTokenError past its expiry and InvalidTokenError for anything
    that is not a well-formed session token signed with our key.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise ExpiredTokenError("Session token expired") from exc
    except JWTError as exc:
        raise InvalidTokenError("Invalid session token") from exc

    user_id = payload.get("sub")
    if not user_id or payload.get("typ") != SESSION_TOKEN_TYPE:
        raise InvalidTokenError("Invalid session token")
    return user_id


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _default_lifetime(purpose: TokenPurpose) -> timedelta:
    if purpose == TokenPurpose.VERIFICATION:
        return timedelta(minutes=settings.verification_token_expires_minutes)
    return timedelta(minutes=settings.reset_token_expires_minutes)


def issue_one_time_token(user: User, purpose: TokenPurpose, expires_delta: timedelta | None = None) -> str:
    """Generate a one-time token for the user and persist its digest.

    Any previous token of the same purpose is replaced. Only the raw token
    returned here can be used to consume it.
    """
    token = secrets.token_hex(32)
    token_field, expires_field = _ONE_TIME_TOKEN_FIELDS[purpose]
    expires_at = datetime.now(timezone.utc) + (expires_delta or _default_lifetime(purpose))
    setattr(user, token_field, _digest(token))
    setattr(user, expires_field, expires_at)
    user.save()
    return token


def consume_one_time_token(user: User, purpose: TokenPurpose, token: str) -> None:
    """Check a one-time token against the user and clear it on success."""
    token_field, expires_field = _ONE_TIME_TOKEN_FIELDS[purpose]
    stored = getattr(user, token_field)
    if not stored or not hmac.compare_digest(stored, _digest(token)):
        raise TokenMismatchError("Token does not match")

    expires_at = getattr(user, expires_field)
    if expires_at is None or _as_utc(expires_at) <= datetime.now(timezone.utc):
        raise ExpiredTokenError("Token expired")

    setattr(user, token_field, None)
    setattr(user, expires_field, None)
    user.save()


def find_user_by_one_time_token(store: UserStore, purpose: TokenPurpose, token: str) -> User | None:
    token_field, _ = _ONE_TIME_TOKEN_FIELDS[purpose]
    return store.find_one(**{token_field: _digest(token)})


def has_required_role(role: Role | str, required: Iterable[Role]) -> bool:
    """True when ``role`` is one of the roles a route accepts."""
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in set(required)
