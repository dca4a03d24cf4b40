"""Poll use cases."""

from .reorder_options import (
    DEFAULT_TEMP_OFFSET,
    POLL_NOT_FOUND,
    ReorderCoordinator,
    reorder_poll_options,
)
from .update_poll_status import activate_scheduled_polls, update_poll_status

__all__ = [
    "DEFAULT_TEMP_OFFSET",
    "POLL_NOT_FOUND",
    "ReorderCoordinator",
    "activate_scheduled_polls",
    "reorder_poll_options",
    "update_poll_status",
]
