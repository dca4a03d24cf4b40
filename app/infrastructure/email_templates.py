"""HTML bodies for notification emails."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from html import escape

from app.domain.entities import Notification

_WRAPPER_STYLE = "font-family:system-ui,-apple-system,Segoe UI,Roboto,Arial,sans-serif"


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str


def _wrap(locale: str, inner: str) -> str:
    return f'<div lang="{escape(locale or "en")}" style="{_WRAPPER_STYLE}">{inner}</div>'


def _link(url: str | None, label: str) -> str:
    if not url:
        return ""
    return f'<p><a href="{escape(url, quote=True)}">{escape(label)}</a></p>'


def build_poll_published_email(
    *,
    locale: str,
    title: str,
    description: str | None,
    full_address: str | None,
    poll_url: str | None,
) -> EmailContent:
    """Email announcing that a poll is open for voting."""

    parts = [
        "<p>A new poll has been published for your building.</p>",
        f"<p><strong>{escape(title)}</strong></p>",
    ]
    if full_address:
        parts.append(f"<p><strong>Address:</strong> {escape(full_address)}</p>")
    if description:
        parts.append(f"<p><strong>Poll description:</strong> {description}</p>")
    parts.append(_link(poll_url, "View and vote in the poll"))
    return EmailContent(
        subject="New poll has been published", html=_wrap(locale, "".join(parts))
    )


def build_calendar_event_email(
    *,
    locale: str,
    title: str,
    description: str | None,
    start_date_time: datetime,
    end_date_time: datetime,
    all_day: bool,
    full_address: str | None,
    event_url: str | None,
) -> EmailContent:
    if all_day:
        when = start_date_time.strftime("%Y-%m-%d")
    else:
        when = (
            f"{start_date_time.strftime('%Y-%m-%d %H:%M')} - "
            f"{end_date_time.strftime('%Y-%m-%d %H:%M')}"
        )
    parts = [
        "<p>A new event has been added to your building calendar.</p>",
        f"<p><strong>{escape(title)}</strong></p>",
        f"<p><strong>When:</strong> {escape(when)}</p>",
    ]
    if full_address:
        parts.append(f"<p><strong>Address:</strong> {escape(full_address)}</p>")
    if description:
        parts.append(f"<div>{description}</div>")
    parts.append(_link(event_url, "Open the calendar"))
    return EmailContent(
        subject=f"New calendar event: {title}", html=_wrap(locale, "".join(parts))
    )


def build_announcement_email(
    *,
    locale: str,
    title: str,
    message: str,
    full_address: str | None,
    announcement_url: str | None,
) -> EmailContent:
    parts = [f"<h2>{escape(title)}</h2>"]
    if full_address:
        parts.append(f"<p style=\"opacity:.7\">{escape(full_address)}</p>")
    parts.append(f"<div>{message}</div>")
    parts.append(_link(announcement_url, "Read the announcement"))
    return EmailContent(subject=f"New announcement: {title}", html=_wrap(locale, "".join(parts)))


def build_notification_digest_email(
    items: Sequence[Notification], *, locale: str = "en"
) -> EmailContent:
    """Email for one recipient's notifications.

    A single item keeps its own title; several items become an
    ``"N new notifications"`` list.
    """

    if not items:
        raise ValueError("At least one notification is required")

    if len(items) == 1:
        item = items[0]
        inner = (
            f"<h2>{escape(item.title)}</h2>"
            f'<p style="opacity:.7;margin:.25rem 0">{escape(item.type.label)}</p>'
            f"<div>{item.description}</div>"
        )
        subject = f"[{item.type.value.upper()}] {item.title}"
        return EmailContent(subject=subject, html=_wrap(locale, inner))

    subject = f"{len(items)} new notifications"
    entries = "".join(
        '<li style="margin-bottom:12px">'
        f'<div style="font-weight:600">{escape(item.title)}</div>'
        f'<div style="font-size:14px;opacity:.8">{escape(item.type.label)}</div>'
        f"<div>{item.description}</div>"
        "</li>"
        for item in items
    )
    inner = f'<h2>{escape(subject)}</h2><ul style="padding-left:18px">{entries}</ul>'
    return EmailContent(subject=subject, html=_wrap(locale, inner))


__all__ = [
    "EmailContent",
    "build_announcement_email",
    "build_calendar_event_email",
    "build_notification_digest_email",
    "build_poll_published_email",
]
