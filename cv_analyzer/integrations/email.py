from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Any

from cv_analyzer.core.config import Settings

logger = logging.getLogger(__name__)


def _smtp_ready(settings: Settings) -> bool:
    return bool(settings.smtp_host and settings.contact_notify_email)


def _smtp_password(settings: Settings) -> str | None:
    if not settings.smtp_password:
        return None
    # Gmail app passwords are often copied with spaces every 4 chars.
    return settings.smtp_password.replace(" ", "")


def _send(settings: Settings, msg: EmailMessage) -> None:
    context = ssl.create_default_context()
    host = settings.smtp_host or ""
    password = _smtp_password(settings)
    if settings.smtp_use_tls:
        with smtplib.SMTP(host, settings.smtp_port, timeout=15) as server:
            server.starttls(context=context)
            if settings.smtp_user and password:
                server.login(settings.smtp_user, password)
            server.send_message(msg)
        return

    with smtplib.SMTP_SSL(host, settings.smtp_port, context=context, timeout=15) as server:
        if settings.smtp_user and password:
            server.login(settings.smtp_user, password)
        server.send_message(msg)


def build_contact_message(payload: dict[str, Any], settings: Settings) -> EmailMessage:
    recipient = settings.contact_notify_email or ""
    msg = EmailMessage()
    msg["Subject"] = f"Contact form: {payload.get('name') or 'Unknown'}"
    msg["From"] = settings.smtp_from or settings.smtp_user or recipient
    msg["To"] = recipient
    if payload.get("email"):
        msg["Reply-To"] = str(payload["email"])
    msg.set_content(
        "\n".join(
            [
                f"Name: {payload.get('name')}",
                f"Email: {payload.get('email')}",
                "",
                str(payload.get("message") or ""),
            ]
        ).strip()
    )
    return msg


def send_contact_message(payload: dict[str, Any], settings: Settings) -> bool:
    if not _smtp_ready(settings):
        logger.info("Contact email notification is not configured; skipping.")
        return False

    try:
        _send(settings, build_contact_message(payload, settings))
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception(
            "Contact email via SMTP failed (host=%s port=%s tls=%s): %s",
            settings.smtp_host,
            settings.smtp_port,
            settings.smtp_use_tls,
            exc,
        )
        return False
    return True
