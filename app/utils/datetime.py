"""Conversions between aware domain datetimes and naive stored columns.

Rows keep the wall-clock time of the application timezone without an
offset; entities always carry aware values.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/Belgrade"


def _parse_offset(name: str) -> tzinfo | None:
    """Read ``UTC+2``, ``GMT-03:00`` or ``+0530`` style fixed offsets."""

    candidate = name.upper().removeprefix("UTC").removeprefix("GMT")
    if not candidate or candidate[0] not in "+-":
        return None
    if ":" not in candidate and len(candidate) <= 3:
        candidate = f"{candidate[0]}{candidate[1:].zfill(2)}:00"
    try:
        return datetime.strptime(candidate, "%z").tzinfo
    except ValueError:
        return None


@lru_cache(maxsize=1)
def app_timezone() -> tzinfo:
    """Return the timezone notifications and polls are stamped in."""

    name = (get_settings().app_timezone or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        offset = _parse_offset(name)
        if offset is not None:
            return offset
    logger.warning("Unknown APP_TIMEZONE %r, using %s", name, DEFAULT_TIMEZONE)
    return ZoneInfo(DEFAULT_TIMEZONE)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=app_timezone())


def storage_now() -> datetime:
    """Column default: the current app wall-clock time without ``tzinfo``."""

    return now_in_app_timezone().replace(tzinfo=None)


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Shift aware values into the app timezone and drop the offset.

    Naive values are taken to already be app wall-clock time.
    """

    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(app_timezone())
    return value.replace(tzinfo=None)


def from_storage_datetime(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=app_timezone())
    return value.astimezone(app_timezone())
