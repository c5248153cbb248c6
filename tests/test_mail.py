"""Tests for SMTP delivery and how its failures reach clients."""

import asyncio
import logging

import aiosmtplib
import pytest
from fastapi.testclient import TestClient

from app.services.mail import MailDeliveryError, reset_password_email, send_email, verification_email
from app.utils.config import settings
from main import app
from tests.conftest import API


@pytest.fixture
def smtp_configured(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.test")
    monkeypatch.setattr(settings, "smtp_user", "mailer")
    monkeypatch.setattr(settings, "smtp_password", "hunter2")


class TestSendEmail:

    def test_skips_without_smtp_host(self, monkeypatch, caplog):
        calls = []

        async def _send(*args, **kwargs):
            calls.append(args)

        monkeypatch.setattr(settings, "smtp_host", None)
        monkeypatch.setattr(aiosmtplib, "send", _send)

        with caplog.at_level(logging.WARNING, logger="app.services.mail"):
            asyncio.run(send_email("alice@example.com", "Hi", "body"))

        assert calls == []
        assert "SMTP not configured" in caplog.text

    def test_sends_over_starttls(self, monkeypatch, smtp_configured):
        sent = []

        async def _send(message, **kwargs):
            sent.append((message, kwargs))

        monkeypatch.setattr(aiosmtplib, "send", _send)

        asyncio.run(send_email("alice@example.com", "Hi", "body"))

        message, kwargs = sent[0]
        assert message["To"] == "alice@example.com"
        assert message["From"] == settings.smtp_from
        assert message["Subject"] == "Hi"
        assert kwargs["hostname"] == "smtp.test"
        assert kwargs["username"] == "mailer"
        assert kwargs["start_tls"] is True

    def test_transport_failure_raises(self, monkeypatch, smtp_configured):
        async def _send(message, **kwargs):
            raise aiosmtplib.SMTPException("connection refused")

        monkeypatch.setattr(aiosmtplib, "send", _send)

        with pytest.raises(MailDeliveryError):
            asyncio.run(send_email("alice@example.com", "Hi", "body"))


def test_transport_failure_is_internal_error(monkeypatch, smtp_configured, user_headers):
    async def _send(message, **kwargs):
        raise aiosmtplib.SMTPException("connection refused")

    monkeypatch.setattr(aiosmtplib, "send", _send)
    client = TestClient(app, raise_server_exceptions=False)

    res = client.post(f"{API}/verify-email", headers=user_headers)

    assert res.status_code == 500
    assert res.json() == {"message": "Something went wrong!"}


def test_links_point_at_client():
    _, verify_body = verification_email("Alice", "abc123")
    _, reset_body = reset_password_email("Alice", "def456")

    assert f"{settings.client_url}/verify-email/abc123" in verify_body
    assert f"{settings.client_url}/reset-password/def456" in reset_body
