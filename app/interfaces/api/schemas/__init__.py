from .notification import NotificationRead, NotificationReadUpdate, NotificationsMarkedRead
from .operation_log import OperationLogRead
from .poll import (
    PollOptionOrderUpdate,
    PollOptionRead,
    PollRead,
    PollStatusUpdate,
    ScheduledPollsActivated,
)

__all__ = [
    "NotificationRead",
    "NotificationReadUpdate",
    "NotificationsMarkedRead",
    "OperationLogRead",
    "PollOptionOrderUpdate",
    "PollOptionRead",
    "PollRead",
    "PollStatusUpdate",
    "ScheduledPollsActivated",
]
