import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis
from fastapi import FastAPI

from app.utils.config import settings


logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    assert _redis_client is not None, "Redis not initialized"
    return _redis_client


def init_redis(url: str | None = None) -> redis.Redis:
    """Create the shared client for the rate limiter.

    No connection is made until the first command is sent.
    """
    global _redis_client
    _redis_client = redis.Redis.from_url(url or settings.redis_uri, decode_responses=True, socket_timeout=2.0)
    kwargs = _redis_client.connection_pool.connection_kwargs
    logger.info("Redis client configured for %s:%s db %s", kwargs.get("host"), kwargs.get("port"), kwargs.get("db"))
    return _redis_client


def close_redis() -> None:
    global _redis_client
    if _redis_client is None:
        return
    try:
        _redis_client.close()
    finally:
        _redis_client = None
        logger.info("Redis client closed")


@asynccontextmanager
async def redis_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_redis()
    try:
        yield
    finally:
        close_redis()
