"""Tests for text, phone and datetime helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.utils import (
    InvalidPhoneNumberError,
    from_storage_datetime,
    html_to_plain_text,
    normalize_phone_number,
    to_storage_datetime,
)
from app.utils import datetime as datetime_utils


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("<p>Hello</p><p>World</p>", "Hello\nWorld"),
        ("Line one<br>Line two<br/>", "Line one\nLine two"),
        ("Fish &amp; chips&nbsp;today", "Fish & chips today"),
        ("<style>p {color: red}</style><b>Bold</b>", "Bold"),
        ("  plain   text  ", "plain text"),
        ("", ""),
        (None, ""),
    ],
)
def test_html_to_plain_text(value, expected):
    assert html_to_plain_text(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("+381641234567", "+381641234567"),
        (" +381 64 123 4567 ", "+381641234567"),
        ("381641234567", "+381641234567"),
        ("+1\t202 555 0100", "+12025550100"),
    ],
)
def test_normalize_phone_number(value, expected):
    assert normalize_phone_number(value) == expected


@pytest.mark.parametrize("value", ["", None, "+", "++381641", "064-123-456", "(064)123", "+38164abc", "٣٨١٦٤"])
def test_normalize_phone_number_rejects_malformed_numbers(value):
    with pytest.raises(InvalidPhoneNumberError):
        normalize_phone_number(value)


def _use_timezone(monkeypatch, name):
    class DummySettings:
        app_timezone = name

    monkeypatch.setattr(datetime_utils, "get_settings", lambda: DummySettings())
    datetime_utils.app_timezone.cache_clear()


@pytest.mark.parametrize(
    ("name", "hours"),
    [("UTC+02:00", 2), ("UTC+2", 2), ("GMT-03:00", -3), ("+0530", 5.5)],
)
def test_app_timezone_accepts_fixed_offsets(monkeypatch, name, hours):
    _use_timezone(monkeypatch, name)
    try:
        tz = datetime_utils.app_timezone()
        assert tz.utcoffset(None) == timedelta(hours=hours)
    finally:
        datetime_utils.app_timezone.cache_clear()


def test_unknown_timezone_falls_back_to_default(monkeypatch):
    _use_timezone(monkeypatch, "Mars/Olympus")
    try:
        assert str(datetime_utils.app_timezone()) == datetime_utils.DEFAULT_TIMEZONE
    finally:
        datetime_utils.app_timezone.cache_clear()


def test_stored_datetimes_are_app_wall_clock_time(monkeypatch):
    _use_timezone(monkeypatch, "UTC-03:00")
    try:
        aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        naive = to_storage_datetime(aware)
        assert naive == datetime(2024, 1, 1, 9, 0)
        assert from_storage_datetime(naive).utcoffset() == timedelta(hours=-3)
        assert from_storage_datetime(None) is None
    finally:
        datetime_utils.app_timezone.cache_clear()
