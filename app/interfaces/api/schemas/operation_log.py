"""Schemas for operation log endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OperationLogRead(BaseModel):
    """Representation of an operation log entry returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None
    action: str
    payload: dict[str, Any] = Field(default_factory=dict)
    status: str
    error: str
    duration_ms: int
    type: str
    created_at: datetime | None


__all__ = ["OperationLogRead"]
