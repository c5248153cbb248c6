from __future__ import annotations
from fastapi import HTTPException, Request

from app.connections.redis import get_redis
from app.models.user import User


def _throttle(key: str, seconds: int) -> None:
    client = get_redis()
    # If a TTL exists, the caller must wait; otherwise set a new TTL.
    ttl = client.ttl(key)
    if ttl and ttl > 0:
        raise HTTPException(status_code=429, detail=f"Rate limited. Try again in {ttl}s")
    client.setex(name=key, time=seconds, value="1")


def throttle_user(request: Request, user: User, seconds: int) -> None:
    """Allow one call per user to this path every N seconds.

    Called from the handler once the request has passed its own checks, so
    rejected requests never open a window.
    """
    _throttle(f"rl:{user.id}:{request.url.path}", seconds)


def throttle_client(request: Request, seconds: int) -> None:
    """Like throttle_user, keyed by client address for routes without a session."""
    host = request.client.host if request.client else "unknown"
    _throttle(f"rl:{host}:{request.url.path}", seconds)
