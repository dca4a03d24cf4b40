"""Domain entity representing a structured operation log entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

LOG_STATUS_SUCCESS = "success"
LOG_STATUS_FAIL = "fail"

LOG_TYPE_DB = "db"
LOG_TYPE_AUTH = "auth"
LOG_TYPE_ACTION = "action"
LOG_TYPE_EMAIL = "email"
LOG_TYPE_EXTERNAL = "external"
LOG_TYPE_STORAGE = "storage"
LOG_TYPE_SYSTEM = "system"


@dataclass
class OperationLogEntry:
    """Outcome of one attempt of a state-changing operation."""

    action: str
    status: str
    type: str
    duration_ms: int = 0
    error: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    user_id: str | None = None
    id: str | None = None
    created_at: datetime | None = None


__all__ = [
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
]
