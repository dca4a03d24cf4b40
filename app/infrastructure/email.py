"""Transactional email delivery through SendGrid."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import Settings, get_settings
from app.domain.entities import DeliveryResult

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                f"{item['message']} (help: {item['help']})"
                if item.get("help")
                else str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(status_code: Any, body: Any) -> str:
    details = _extract_sendgrid_error_details(body)
    if status_code and details:
        return f"SendGrid API request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid API request failed with status {status_code}"
    if details:
        return f"SendGrid API request failed: {details}"
    return "SendGrid API request failed"


def _message_id(response: Any) -> str | None:
    headers = getattr(response, "headers", None)
    if headers is None:
        return None
    try:
        value = headers.get("X-Message-Id")
    except AttributeError:
        return None
    return str(value) if value else None


class SendGridEmailTransport:
    """Send HTML email to one or more addresses through the SendGrid REST API."""

    def __init__(self, api_key: str, sender: str) -> None:
        self._api_key = api_key
        self._sender = sender

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SendGridEmailTransport | None":
        """Return a transport, or ``None`` when SendGrid is not configured."""

        settings = settings or get_settings()
        if not settings.email_enabled:
            logger.info("SendGrid configuration incomplete; email delivery disabled")
            return None
        return cls(settings.sendgrid_api_key, settings.sendgrid_sender)

    def send(self, to: Sequence[str], subject: str, html: str) -> DeliveryResult:
        recipients = [address for address in to if address]
        if not recipients:
            return DeliveryResult(ok=False, error="No recipients provided")

        message = Mail(
            from_email=self._sender,
            to_emails=recipients,
            subject=subject,
            html_content=html,
            is_multiple=len(recipients) > 1,
        )

        try:
            response = SendGridAPIClient(self._api_key).send(message)
        except Exception as exc:  # python_http_client raises HTTPError subclasses
            error = _describe_failure(
                getattr(exc, "status_code", None), getattr(exc, "body", None)
            )
            if error == "SendGrid API request failed":
                error = f"{error}: {exc}"
            logger.error(error)
            return DeliveryResult(ok=False, error=error)

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            error = _describe_failure(status_code, getattr(response, "body", None))
            logger.error(error)
            return DeliveryResult(ok=False, error=error)

        return DeliveryResult(ok=True, id=_message_id(response), status=str(status_code))


__all__ = ["SendGridEmailTransport"]
