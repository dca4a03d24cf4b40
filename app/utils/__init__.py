"""Utility helpers for reusable functionality."""

from .datetime import (
    app_timezone,
    from_storage_datetime,
    now_in_app_timezone,
    storage_now,
    to_storage_datetime,
)
from .html import html_to_plain_text
from .phone import InvalidPhoneNumberError, normalize_phone_number

__all__ = [
    "app_timezone",
    "from_storage_datetime",
    "now_in_app_timezone",
    "storage_now",
    "to_storage_datetime",
    "html_to_plain_text",
    "InvalidPhoneNumberError",
    "normalize_phone_number",
]
