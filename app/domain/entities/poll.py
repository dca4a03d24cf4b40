"""Domain entities for polls and their ordered options."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

POLL_STATUS_DRAFT = "draft"
POLL_STATUS_SCHEDULED = "scheduled"
POLL_STATUS_ACTIVE = "active"
POLL_STATUS_CLOSED = "closed"
POLL_STATUS_ARCHIVED = "archived"

POLL_STATUSES = frozenset(
    {
        POLL_STATUS_DRAFT,
        POLL_STATUS_SCHEDULED,
        POLL_STATUS_ACTIVE,
        POLL_STATUS_CLOSED,
        POLL_STATUS_ARCHIVED,
    }
)


@dataclass
class Poll:
    id: str | None
    building_id: str | None
    title: str
    description: str | None
    status: str
    starts_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class PollOption:
    """Option of a poll; ``sort_order`` is unique per poll."""

    id: str | None
    poll_id: str
    label: str
    sort_order: int


__all__ = [
    "Poll",
    "PollOption",
    "POLL_STATUS_DRAFT",
    "POLL_STATUS_SCHEDULED",
    "POLL_STATUS_ACTIVE",
    "POLL_STATUS_CLOSED",
    "POLL_STATUS_ARCHIVED",
    "POLL_STATUSES",
]
