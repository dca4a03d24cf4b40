"""Domain entities exposed by the application."""

from .building import Building, BuildingAddress
from .delivery import DeliveryResult
from .events import Announcement, CalendarEvent
from .notification import Notification, NotificationType
from .operation_log import (
    LOG_STATUS_FAIL,
    LOG_STATUS_SUCCESS,
    LOG_TYPE_ACTION,
    LOG_TYPE_AUTH,
    LOG_TYPE_DB,
    LOG_TYPE_EMAIL,
    LOG_TYPE_EXTERNAL,
    LOG_TYPE_STORAGE,
    LOG_TYPE_SYSTEM,
    OperationLogEntry,
)
from .poll import (
    POLL_STATUS_ACTIVE,
    POLL_STATUS_ARCHIVED,
    POLL_STATUS_CLOSED,
    POLL_STATUS_DRAFT,
    POLL_STATUS_SCHEDULED,
    POLL_STATUSES,
    Poll,
    PollOption,
)
from .recipient import Recipient
from .results import ActionResult, EmitResult, FanOutReport

__all__ = [
    "ActionResult",
    "Announcement",
    "Building",
    "BuildingAddress",
    "CalendarEvent",
    "DeliveryResult",
    "EmitResult",
    "FanOutReport",
    "Notification",
    "NotificationType",
    "OperationLogEntry",
    "LOG_STATUS_SUCCESS",
    "LOG_STATUS_FAIL",
    "LOG_TYPE_DB",
    "LOG_TYPE_AUTH",
    "LOG_TYPE_ACTION",
    "LOG_TYPE_EMAIL",
    "LOG_TYPE_EXTERNAL",
    "LOG_TYPE_STORAGE",
    "LOG_TYPE_SYSTEM",
    "Poll",
    "PollOption",
    "POLL_STATUS_DRAFT",
    "POLL_STATUS_SCHEDULED",
    "POLL_STATUS_ACTIVE",
    "POLL_STATUS_CLOSED",
    "POLL_STATUS_ARCHIVED",
    "POLL_STATUSES",
    "Recipient",
]
