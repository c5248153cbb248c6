import logging
from email.message import EmailMessage

import aiosmtplib

from app.utils.config import settings


logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    pass


async def send_email(to: str, subject: str, body: str) -> None:
    """Send a plain-text email over SMTP with STARTTLS.

    Skips delivery (with a warning) when no SMTP host is configured, so local
    environments work without a mail server.
    """
    if not settings.smtp_host:
        logger.warning("SMTP not configured, skipping email to %s: %s", to, subject)
        return

    message = EmailMessage()
    message["From"] = settings.smtp_from
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)

    try:
        await aiosmtplib.send(
            message,
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            start_tls=True,
            timeout=10,
        )
    except aiosmtplib.SMTPException as exc:
        raise MailDeliveryError(f"Could not deliver email to {to}") from exc
    logger.info("Sent email to %s: %s", to, subject)


def verification_email(name: str, token: str) -> tuple[str, str]:
    link = f"{settings.client_url}/verify-email/{token}"
    body = (
        f"Hello {name},\n\n"
        f"Please verify your email address by opening the link below:\n{link}\n\n"
        f"The link expires in {settings.verification_token_expires_minutes} minutes.\n"
    )
    return "Email Verification", body


def reset_password_email(name: str, token: str) -> tuple[str, str]:
    link = f"{settings.client_url}/reset-password/{token}"
    body = (
        f"Hello {name},\n\n"
        f"A password reset was requested for your account. Use the link below to choose a new password:\n{link}\n\n"
        f"The link expires in {settings.reset_token_expires_minutes} minutes. "
        "If you did not request it, ignore this email.\n"
    )
    return "Reset Password", body
