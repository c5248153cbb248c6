import os
import re

# Settings are read at import time; keep hashing cheap and cookies usable over http
os.environ.setdefault("bcrypt_rounds", "4")
os.environ.setdefault("jwt_secret_key", "test-secret-key")
os.environ.setdefault("session_cookie_secure", "false")
os.environ.setdefault("session_cookie_samesite", "lax")

import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

from app.models.task import Task
from app.models.user import User
from app.services.auth import create_session_token, hash_password
from app.services.users import UserStore
from app.utils.base import Role
from app.utils.config import settings
from main import app


API = settings.api_prefix


class FakeRedis:
    """Just enough of the redis client for TTL based rate limiting."""

    def __init__(self):
        self.expiry: dict[str, int] = {}

    def ttl(self, key):
        return self.expiry.get(key, -2)

    def setex(self, name, time, value):
        self.expiry[name] = time
        return True


@pytest.fixture(autouse=True)
def mongo_db():
    connect(
        "task_manager_test",
        host="mongodb://localhost",
        alias="default",
        mongo_client_class=mongomock.MongoClient,
    )
    yield
    User.drop_collection()
    Task.drop_collection()
    disconnect(alias="default")


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    client = FakeRedis()
    monkeypatch.setattr("app.services.rate_limit.get_redis", lambda: client)
    return client


@pytest.fixture
def outbox(monkeypatch):
    """Capture outgoing emails instead of talking to SMTP."""
    sent: list[dict] = []

    async def _send_email(to, subject, body):
        sent.append({"to": to, "subject": subject, "body": body})

    monkeypatch.setattr("app.api.user.send_email", _send_email)
    return sent


def token_from_email(message: dict) -> str:
    match = re.search(r"/(?:verify-email|reset-password)/([0-9a-f]+)", message["body"])
    assert match, message["body"]
    return match.group(1)


@pytest.fixture
def client():
    return TestClient(app)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def make_user(email: str, password: str = "Secret123!", role: Role = Role.USER, name: str = "Test User") -> User:
    return UserStore().create(name=name, email=email, password=hash_password(password), role=role.value)


@pytest.fixture
def user():
    return make_user("alice@example.com", name="Alice")


@pytest.fixture
def other_user():
    return make_user("bob@example.com", name="Bob")


@pytest.fixture
def user_headers(user):
    return auth_headers(create_session_token(str(user.id)))


@pytest.fixture
def other_headers(other_user):
    return auth_headers(create_session_token(str(other_user.id)))
