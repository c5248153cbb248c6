import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from app.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo(host: str | None = None, **kwargs: Any) -> None:
    """Open the default mongoengine connection.

    TLS connections (``mongodb+srv``) get the certifi CA bundle unless the
    caller passes its own options.
    """
    host = host or settings.mongo_uri
    if host.startswith("mongodb+srv://") or "tls=true" in host:
        kwargs.setdefault("tlsCAFile", certifi.where())
    kwargs.setdefault("tz_aware", True)
    connect(host=host, alias="default", **kwargs)
    logger.info("Connected to MongoDB database %s", settings.mongo_db)


def close_mongo() -> None:
    disconnect(alias="default")
    logger.info("Disconnected from MongoDB")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    try:
        yield
    finally:
        close_mongo()
