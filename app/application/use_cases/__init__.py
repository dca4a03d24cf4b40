"""Aggregate application use cases."""

from .notifications import (
    build_notification_pipeline,
    notify_announcement_published,
    notify_calendar_event_created,
    notify_direct_message,
    notify_poll_published,
)
from .operation_logs import OperationLog, list_operation_logs
from .polls import activate_scheduled_polls, reorder_poll_options, update_poll_status

__all__ = [
    "OperationLog",
    "activate_scheduled_polls",
    "build_notification_pipeline",
    "list_operation_logs",
    "notify_announcement_published",
    "notify_calendar_event_created",
    "notify_direct_message",
    "notify_poll_published",
    "reorder_poll_options",
    "update_poll_status",
]
