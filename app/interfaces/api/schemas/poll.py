"""Schemas for poll status and option ordering endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PollRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    building_id: str | None = None
    title: str
    description: str | None = None
    status: str
    starts_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime | None = None


class PollStatusUpdate(BaseModel):
    """Payload used to move a poll to another status."""

    status: str = Field(..., min_length=1)


class PollOptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    poll_id: str
    label: str
    sort_order: int


class PollOptionOrderUpdate(BaseModel):
    """Complete ordering of a poll's option identifiers."""

    option_ids: list[str] = Field(default_factory=list)


class ScheduledPollsActivated(BaseModel):
    activated: list[PollRead] = Field(default_factory=list)


__all__ = [
    "PollOptionOrderUpdate",
    "PollOptionRead",
    "PollRead",
    "PollStatusUpdate",
    "ScheduledPollsActivated",
]
