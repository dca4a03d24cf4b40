"""Repository implementations for infrastructure layer."""

from .building_repository import BuildingRepository
from .notification_repository import NotificationRepository
from .operation_log_repository import OperationLogRepository, SessionOperationLogSink
from .poll_repository import PollOptionRepository, PollRepository
from .tenant_repository import TenantRepository

__all__ = [
    "BuildingRepository",
    "NotificationRepository",
    "OperationLogRepository",
    "SessionOperationLogSink",
    "PollRepository",
    "PollOptionRepository",
    "TenantRepository",
]
