"""
Outbound email through the provider's HTTP API.

When EMAIL_API_KEY is not set the message is logged and dropped, so local
development works without a provider account.
"""

import logging

import requests

from config import EMAIL_API_KEY, EMAIL_API_URL, EMAIL_FROM, FRONTEND_URL
from errors import EmailDeliveryError

logger = logging.getLogger("hackathon-backend")


def _post_email(to: str, subject: str, html: str) -> bool:
    if not EMAIL_API_KEY:
        logger.info("EMAIL_API_KEY not set, skipping email %r to %s", subject, to)
        return False
    payload = {
        "personalizations": [{"to": [{"email": to}]}],
        "from": {"email": EMAIL_FROM},
        "subject": subject,
        "content": [{"type": "text/html", "value": html}],
    }
    headers = {"Authorization": f"Bearer {EMAIL_API_KEY}"}
    r = requests.post(EMAIL_API_URL, json=payload, headers=headers, timeout=15)
    if r.status_code >= 400:
        raise EmailDeliveryError(f"Email provider returned {r.status_code}: {r.text[:200]}")
    return True


def send_verification_email(email: str, token: str) -> bool:
    link = f"{FRONTEND_URL}/verify/{token}"
    html = (
        "<p>Thanks for registering!</p>"
        f'<p>Please <a href="{link}">verify your email address</a> to continue.</p>'
    )
    return _post_email(email, "Verify your email", html)


def send_password_reset_email(email: str, token: str) -> bool:
    link = f"{FRONTEND_URL}/reset-password/{token}"
    html = (
        "<p>We received a request to reset your password.</p>"
        f'<p><a href="{link}">Choose a new password</a>. '
        "If you did not ask for this, you can ignore this email.</p>"
    )
    return _post_email(email, "Reset your password", html)


def dispatch_verification_email(email: str, token: str) -> None:
    """Background variant: runs after the response is sent, failures are only logged."""
    try:
        send_verification_email(email, token)
    except Exception:
        logger.exception("Failed to send verification email to %s", email)
