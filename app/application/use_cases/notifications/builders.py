"""Pure constructors for notification records.

Every builder takes the ``created_at`` stamp from the caller so all records
produced for one event share the same creation time.
"""

from __future__ import annotations

from datetime import datetime

from app.domain.entities import Notification, NotificationType

POLL_PUBLISHED_ACTION = "notifications.actions.notificationActionPollPublished"
CALENDAR_EVENT_CREATED_ACTION = "notifications.actions.notificationActionCalendarEventCreated"
ANNOUNCEMENT_PUBLISHED_ACTION = "notifications.actions.notificationActionAnnouncementPublished"
MESSAGE_RECEIVED_ACTION = "notifications.actions.notificationActionMessageReceived"


class NotificationValidationError(ValueError):
    """Raised when a notification record misses required fields."""


def build_notification(
    *,
    user_id: str,
    type: NotificationType | str,
    action_token: str,
    title: str,
    description: str,
    created_at: datetime,
    url: str | None = None,
    building_id: str | None = None,
    poll_id: str | None = None,
    announcement_id: str | None = None,
    calendar_event_id: str | None = None,
    calendar_event_type: str | None = None,
    start_date_time: datetime | None = None,
    end_date_time: datetime | None = None,
    all_day: bool | None = None,
    sender_id: str | None = None,
) -> Notification:
    """Return an unread :class:`Notification` after validating required fields."""

    if not user_id or not str(user_id).strip():
        raise NotificationValidationError("Notification user_id is required")
    if not action_token or not action_token.strip():
        raise NotificationValidationError("Notification action_token is required")
    if not isinstance(created_at, datetime):
        raise NotificationValidationError("Notification created_at must be a datetime")
    try:
        notification_type = NotificationType.parse(type)
    except ValueError as exc:
        raise NotificationValidationError(str(exc)) from exc

    return Notification(
        id=None,
        user_id=str(user_id),
        type=notification_type,
        action_token=action_token,
        title=title or "",
        description=description or "",
        created_at=created_at,
        is_read=False,
        url=url,
        building_id=building_id,
        poll_id=poll_id,
        announcement_id=announcement_id,
        calendar_event_id=calendar_event_id,
        calendar_event_type=calendar_event_type,
        start_date_time=start_date_time,
        end_date_time=end_date_time,
        all_day=all_day,
        sender_id=sender_id,
    )


def build_poll_published_notification(
    *,
    user_id: str,
    poll_id: str,
    building_id: str | None,
    title: str,
    description: str | None,
    created_at: datetime,
) -> Notification:
    return build_notification(
        user_id=user_id,
        type=NotificationType.ANNOUNCEMENT,
        action_token=POLL_PUBLISHED_ACTION,
        title=title,
        description=description or "",
        created_at=created_at,
        url=f"/dashboard/polls/{poll_id}",
        building_id=building_id,
        poll_id=poll_id,
    )


def build_calendar_event_notification(
    *,
    user_id: str,
    calendar_event_id: str,
    building_id: str | None,
    title: str,
    description: str | None,
    start_date_time: datetime,
    end_date_time: datetime,
    all_day: bool,
    calendar_event_type: str | None,
    created_at: datetime,
) -> Notification:
    return build_notification(
        user_id=user_id,
        type=NotificationType.REMINDER,
        action_token=CALENDAR_EVENT_CREATED_ACTION,
        title=title,
        description=description or "",
        created_at=created_at,
        url="/dashboard/calendar",
        building_id=building_id,
        calendar_event_id=calendar_event_id,
        calendar_event_type=calendar_event_type,
        start_date_time=start_date_time,
        end_date_time=end_date_time,
        all_day=all_day,
    )


def build_announcement_notification(
    *,
    user_id: str,
    announcement_id: str,
    building_id: str | None,
    title: str,
    description: str | None,
    created_at: datetime,
    is_urgent: bool = False,
) -> Notification:
    """Urgent announcements are tagged as alerts."""

    return build_notification(
        user_id=user_id,
        type=NotificationType.ALERT if is_urgent else NotificationType.ANNOUNCEMENT,
        action_token=ANNOUNCEMENT_PUBLISHED_ACTION,
        title=title,
        description=description or title,
        created_at=created_at,
        url=f"/dashboard/announcements/{announcement_id}",
        building_id=building_id,
        announcement_id=announcement_id,
    )


def build_message_notification(
    *,
    user_id: str,
    sender_id: str,
    title: str,
    description: str,
    created_at: datetime,
    url: str | None = None,
) -> Notification:
    return build_notification(
        user_id=user_id,
        type=NotificationType.MESSAGE,
        action_token=MESSAGE_RECEIVED_ACTION,
        title=title,
        description=description,
        created_at=created_at,
        url=url or "/dashboard/chat",
        sender_id=sender_id,
    )


__all__ = [
    "ANNOUNCEMENT_PUBLISHED_ACTION",
    "CALENDAR_EVENT_CREATED_ACTION",
    "MESSAGE_RECEIVED_ACTION",
    "POLL_PUBLISHED_ACTION",
    "NotificationValidationError",
    "build_announcement_notification",
    "build_calendar_event_notification",
    "build_message_notification",
    "build_notification",
    "build_poll_published_notification",
]
