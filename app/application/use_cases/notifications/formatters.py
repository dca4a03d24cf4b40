"""Grouping and consolidation of notifications into channel messages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.domain.entities import Notification, NotificationType
from app.utils import html_to_plain_text


@dataclass(frozen=True)
class ChannelMessage:
    title: str
    body: str
    type: NotificationType


def group_by_user(records: Sequence[Notification]) -> dict[str, list[Notification]]:
    """Group ``records`` by ``user_id`` keeping first-seen user order."""

    grouped: dict[str, list[Notification]] = {}
    for record in records:
        grouped.setdefault(record.user_id, []).append(record)
    return grouped


def consolidate(items: Sequence[Notification]) -> ChannelMessage:
    """Collapse one recipient's notifications into a single channel message.

    One notification keeps its own title, description and type. Several
    become an ``"N new notifications"`` digest whose body is the plain-text
    descriptions joined by newlines in input order, typed after the first.
    """

    if not items:
        raise ValueError("At least one notification is required")

    first = items[0]
    if len(items) == 1:
        return ChannelMessage(
            title=first.title,
            body=html_to_plain_text(first.description),
            type=NotificationType.parse(first.type),
        )

    return ChannelMessage(
        title=f"{len(items)} new notifications",
        body="\n".join(html_to_plain_text(item.description) for item in items),
        type=NotificationType.parse(first.type),
    )


__all__ = ["ChannelMessage", "consolidate", "group_by_user"]
