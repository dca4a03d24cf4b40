"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
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


class NotificationReadUpdate(BaseModel):
    """Payload used to toggle the read state of a notification."""

    is_read: bool = Field(default=True)


class NotificationsMarkedRead(BaseModel):
    updated: int


__all__ = ["NotificationRead", "NotificationReadUpdate", "NotificationsMarkedRead"]
