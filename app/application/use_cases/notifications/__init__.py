"""Notification audience, persistence, delivery and inbox use cases."""

from .audience import AudienceResolver
from .builders import (
    ANNOUNCEMENT_PUBLISHED_ACTION,
    CALENDAR_EVENT_CREATED_ACTION,
    MESSAGE_RECEIVED_ACTION,
    POLL_PUBLISHED_ACTION,
    NotificationValidationError,
    build_announcement_notification,
    build_calendar_event_notification,
    build_message_notification,
    build_notification,
    build_poll_published_notification,
)
from .dispatcher import ALL_CHANNELS, CHANNEL_EMAIL, CHANNEL_SMS, ChannelDispatcher
from .events import (
    NotificationPipeline,
    notify_announcement_published,
    notify_calendar_event_created,
    notify_direct_message,
    notify_poll_published,
)
from .formatters import ChannelMessage, consolidate, group_by_user
from .inbox import (
    INVALID_NOTIFICATION_ID,
    NOTIFICATION_NOT_FOUND,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    set_notification_read,
)
from .pipeline import build_notification_pipeline
from .store import DEFAULT_BATCH_SIZE, NotificationStore

__all__ = [
    "ALL_CHANNELS",
    "ANNOUNCEMENT_PUBLISHED_ACTION",
    "AudienceResolver",
    "CALENDAR_EVENT_CREATED_ACTION",
    "CHANNEL_EMAIL",
    "CHANNEL_SMS",
    "ChannelDispatcher",
    "ChannelMessage",
    "DEFAULT_BATCH_SIZE",
    "INVALID_NOTIFICATION_ID",
    "NOTIFICATION_NOT_FOUND",
    "MESSAGE_RECEIVED_ACTION",
    "NotificationPipeline",
    "NotificationStore",
    "NotificationValidationError",
    "POLL_PUBLISHED_ACTION",
    "build_announcement_notification",
    "build_calendar_event_notification",
    "build_message_notification",
    "build_notification",
    "build_notification_pipeline",
    "build_poll_published_notification",
    "consolidate",
    "delete_notification",
    "group_by_user",
    "list_notifications",
    "mark_all_notifications_read",
    "notify_announcement_published",
    "notify_calendar_event_created",
    "notify_direct_message",
    "notify_poll_published",
    "set_notification_read",
]
