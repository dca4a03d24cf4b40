"""Domain events that fan out notifications to building tenants."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class CalendarEvent:
    id: str
    title: str
    description: str
    start_date_time: datetime
    end_date_time: datetime
    all_day: bool = False
    event_type: str | None = None
    building_ids: list[str] = field(default_factory=list)


@dataclass
class Announcement:
    id: str
    title: str
    message: str
    building_ids: list[str] = field(default_factory=list)
    is_urgent: bool = False


__all__ = ["Announcement", "CalendarEvent"]
