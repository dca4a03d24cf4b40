"""SMS and WhatsApp delivery through the Twilio Messages REST API."""

from __future__ import annotations

import logging
from typing import Any, Final

import requests

from app.config import Settings, get_settings
from app.domain.entities import DeliveryResult, NotificationType
from app.utils import normalize_phone_number

logger = logging.getLogger(__name__)

TWILIO_API_BASE_URL: Final[str] = "https://api.twilio.com/2010-04-01"
WHATSAPP_PREFIX: Final[str] = "whatsapp:"


class MessageDeliveryError(RuntimeError):
    """Raised when Twilio rejects a message or returns no message SID."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def format_channel_message(
    title: str, body: str, notification_type: NotificationType
) -> str:
    """Decorate a message with a type-specific header and body emphasis.

    Uses WhatsApp markup (``*bold*``, ``_italic_``), which plain SMS shows
    verbatim.
    """

    notification_type = NotificationType.parse(notification_type)
    header = f"{notification_type.emoji} *{notification_type.label}*"
    if notification_type is NotificationType.ALERT:
        body = f"*{body}*" if body else body
    elif notification_type in (NotificationType.REMINDER, NotificationType.MESSAGE):
        body = f"_{body}_" if body else body

    return "\n\n".join(part for part in (header, title, body) if part)


def _twilio_error_details(response: requests.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        return response.text.strip() or response.reason or "unknown error"
    if isinstance(payload, dict) and payload.get("message"):
        code = payload.get("code")
        return f"{payload['message']} (code {code})" if code else str(payload["message"])
    return str(payload)


class TwilioMessageClient:
    """Send notification messages over WhatsApp or SMS."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        sender_number: str,
        *,
        channel: str = "whatsapp",
        whatsapp_sender_number: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if channel not in ("whatsapp", "sms"):
            raise ValueError(f"Unsupported Twilio channel: {channel!r}")
        self._account_sid = account_sid
        self._auth = (account_sid, auth_token)
        self._channel = channel
        self._timeout = timeout
        self._session = session or requests.Session()
        self._sender = self._address(whatsapp_sender_number or sender_number)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TwilioMessageClient | None":
        """Return a client, or ``None`` when Twilio is not configured."""

        settings = settings or get_settings()
        if not settings.messaging_enabled:
            logger.info("Twilio configuration incomplete; SMS/WhatsApp delivery disabled")
            return None
        return cls(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            settings.twilio_sender_phone_number,
            channel=settings.twilio_channel,
            whatsapp_sender_number=(
                settings.twilio_sender_whatsapp_number
                if settings.twilio_channel == "whatsapp"
                else None
            ),
            timeout=settings.twilio_timeout_seconds,
        )

    @property
    def channel(self) -> str:
        return self._channel

    def send(
        self,
        to: str,
        title: str,
        body: str,
        notification_type: NotificationType,
    ) -> DeliveryResult:
        """Send one decorated message to ``to``.

        Raises :class:`MessageDeliveryError` on provider rejections and lets
        ``requests`` exceptions propagate.
        """

        url = f"{TWILIO_API_BASE_URL}/Accounts/{self._account_sid}/Messages.json"
        data = {
            "From": self._sender,
            "To": self._address(to),
            "Body": format_channel_message(title, body, notification_type),
        }
        response = self._session.post(url, data=data, auth=self._auth, timeout=self._timeout)

        if response.status_code >= 400:
            raise MessageDeliveryError(
                f"Twilio responded with status {response.status_code}: "
                f"{_twilio_error_details(response)}",
                status_code=response.status_code,
            )

        payload = response.json()
        sid = payload.get("sid") if isinstance(payload, dict) else None
        if not sid:
            raise MessageDeliveryError(
                "No message SID returned from Twilio", status_code=response.status_code
            )
        return DeliveryResult(ok=True, id=sid, status=payload.get("status"))

    def _address(self, number: str) -> str:
        if number.startswith(WHATSAPP_PREFIX):
            number = number[len(WHATSAPP_PREFIX):]
        normalized = normalize_phone_number(number)
        if self._channel == "whatsapp":
            return f"{WHATSAPP_PREFIX}{normalized}"
        return normalized


__all__ = [
    "MessageDeliveryError",
    "TwilioMessageClient",
    "format_channel_message",
]
