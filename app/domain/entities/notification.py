"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Closed set of notification kinds.

    ``value`` is the literal persisted in the ``notifications.type`` column;
    ``label`` is only used for presentation.
    """

    ALERT = "alert"
    ANNOUNCEMENT = "announcement"
    REMINDER = "reminder"
    MESSAGE = "message"
    SYSTEM = "system"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def emoji(self) -> str:
        return _EMOJIS[self]

    @classmethod
    def parse(cls, value: "str | NotificationType") -> "NotificationType":
        """Return the member matching ``value`` or raise ``ValueError``."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown notification type: {value!r}") from exc


_LABELS: dict[NotificationType, str] = {
    NotificationType.ALERT: "Alert",
    NotificationType.ANNOUNCEMENT: "Announcement",
    NotificationType.REMINDER: "Reminder",
    NotificationType.MESSAGE: "New Message",
    NotificationType.SYSTEM: "System Update",
}

_EMOJIS: dict[NotificationType, str] = {
    NotificationType.ALERT: "\U0001F6A8",
    NotificationType.ANNOUNCEMENT: "\U0001F4E2",
    NotificationType.REMINDER: "⏰",
    NotificationType.MESSAGE: "\U0001F4AC",
    NotificationType.SYSTEM: "\U0001F6E0️",
}


@dataclass
class Notification:
    """In-app notification addressed to a single user."""

    id: str | None
    user_id: str
    type: NotificationType
    action_token: str
    title: str
    description: str
    created_at: datetime
    is_read: bool = False
    url: str | None = None
    building_id: str | None = None
    poll_id: str | None = None
    announcement_id: str | None = None
    calendar_event_id: str | None = None
    calendar_event_type: str | None = None
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    all_day: bool | None = None
    sender_id: str | None = None


__all__ = ["Notification", "NotificationType"]
