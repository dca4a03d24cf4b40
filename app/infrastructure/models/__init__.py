"""ORM models used by the application infrastructure."""

from .building import ApartmentModel, BuildingModel, ClientModel, TenantModel
from .notification import NotificationModel
from .operation_log import OperationLogModel
from .poll import PollModel, PollOptionModel

__all__ = [
    "ApartmentModel",
    "BuildingModel",
    "ClientModel",
    "TenantModel",
    "NotificationModel",
    "OperationLogModel",
    "PollModel",
    "PollOptionModel",
]
