"""Notification flows triggered by domain events.

Each flow resolves the audience, builds one record per recipient with a
shared ``created_at``, persists them through :class:`NotificationStore` and
then hands the persisted records to :class:`ChannelDispatcher`. Channel
delivery never changes the outcome of a flow. Store and audience calls
run in worker threads.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from anyio import to_thread

from app.domain.entities import (
    ActionResult,
    Announcement,
    CalendarEvent,
    Notification,
    Poll,
    Recipient,
)
from app.infrastructure.email_templates import (
    EmailContent,
    build_announcement_email,
    build_calendar_event_email,
    build_poll_published_email,
)
from app.utils import now_in_app_timezone

from ..operation_logs import OperationLog
from .audience import AudienceResolver
from .builders import (
    NotificationValidationError,
    build_announcement_notification,
    build_calendar_event_notification,
    build_message_notification,
    build_poll_published_notification,
)
from .dispatcher import ALL_CHANNELS, CHANNEL_SMS, ChannelDispatcher
from .store import NotificationStore

logger = logging.getLogger(__name__)


@dataclass
class NotificationPipeline:
    """Collaborators shared by every notification flow."""

    audience: AudienceResolver
    store: NotificationStore
    dispatcher: ChannelDispatcher
    operation_log: OperationLog
    app_base_url: str = ""
    default_locale: str = "en"

    def absolute_url(self, path: str | None) -> str | None:
        if not path:
            return None
        if path.startswith(("http://", "https://")) or not self.app_base_url:
            return path
        return f"{self.app_base_url.rstrip('/')}/{path.lstrip('/')}"


async def _persist_and_dispatch(
    pipeline: NotificationPipeline,
    records: Sequence[Notification],
    *,
    channels: Iterable[str],
) -> ActionResult[int]:
    emitted = await to_thread.run_sync(pipeline.store.emit, records)
    persisted = list(records[: emitted.inserted_count])
    if persisted:
        await pipeline.dispatcher.fan_out(persisted, channels=channels)
    if not emitted.success:
        return ActionResult.fail(emitted.error or "Failed to store notifications")
    return ActionResult.ok(emitted.inserted_count)


def _build_records(
    recipients: Sequence[Recipient], factory: Callable[[Recipient], Notification]
) -> ActionResult[list[Notification]]:
    try:
        return ActionResult.ok([factory(recipient) for recipient in recipients])
    except NotificationValidationError as exc:
        logger.error("Invalid notification record: %s", exc)
        return ActionResult.fail(str(exc))


async def _email_building(
    pipeline: NotificationPipeline,
    building_id: str,
    render: Callable[[str | None], EmailContent],
) -> None:
    emails = await to_thread.run_sync(
        pipeline.audience.resolve_notification_emails_for_buildings, [building_id]
    )
    if not emails.success or not emails.data:
        return
    address = await to_thread.run_sync(pipeline.audience.resolve_building_address, building_id)
    content = render(address.data if address.success else None)
    await pipeline.dispatcher.send_bulk_email(emails.data, content)


async def notify_poll_published(
    pipeline: NotificationPipeline,
    poll: Poll,
    *,
    created_at: datetime | None = None,
) -> ActionResult[int]:
    """Notify every tenant of the poll's building that voting is open."""

    if not poll.id or not poll.building_id:
        return ActionResult.ok(0)

    audience = await to_thread.run_sync(
        pipeline.audience.resolve_tenants_for_buildings, [poll.building_id]
    )
    if not audience.success:
        return ActionResult.fail(audience.error or "Failed to resolve tenants")

    stamp = created_at or now_in_app_timezone()
    built = _build_records(
        audience.data or [],
        lambda recipient: build_poll_published_notification(
            user_id=recipient.user_id,
            poll_id=poll.id,
            building_id=poll.building_id,
            title=poll.title,
            description=poll.description,
            created_at=stamp,
        ),
    )
    if not built.success:
        return ActionResult.fail(built.error)

    result = ActionResult.ok(0)
    if built.data:
        result = await _persist_and_dispatch(pipeline, built.data, channels={CHANNEL_SMS})

    poll_url = pipeline.absolute_url(f"/dashboard/polls/{poll.id}")
    await _email_building(
        pipeline,
        poll.building_id,
        lambda full_address: build_poll_published_email(
            locale=pipeline.default_locale,
            title=poll.title,
            description=poll.description,
            full_address=full_address,
            poll_url=poll_url,
        ),
    )
    return result


async def notify_calendar_event_created(
    pipeline: NotificationPipeline,
    event: CalendarEvent,
    *,
    created_at: datetime | None = None,
) -> ActionResult[int]:
    audience = await to_thread.run_sync(
        pipeline.audience.resolve_tenants_for_buildings, event.building_ids
    )
    if not audience.success:
        return ActionResult.fail(audience.error or "Failed to resolve tenants")

    stamp = created_at or now_in_app_timezone()
    built = _build_records(
        audience.data or [],
        lambda recipient: build_calendar_event_notification(
            user_id=recipient.user_id,
            calendar_event_id=event.id,
            building_id=recipient.building_id,
            title=event.title,
            description=event.description,
            start_date_time=event.start_date_time,
            end_date_time=event.end_date_time,
            all_day=event.all_day,
            calendar_event_type=event.event_type,
            created_at=stamp,
        ),
    )
    if not built.success:
        return ActionResult.fail(built.error)

    result = ActionResult.ok(0)
    if built.data:
        result = await _persist_and_dispatch(pipeline, built.data, channels={CHANNEL_SMS})

    event_url = pipeline.absolute_url("/dashboard/calendar")
    for building_id in dict.fromkeys(event.building_ids):
        await _email_building(
            pipeline,
            building_id,
            lambda full_address: build_calendar_event_email(
                locale=pipeline.default_locale,
                title=event.title,
                description=event.description,
                start_date_time=event.start_date_time,
                end_date_time=event.end_date_time,
                all_day=event.all_day,
                full_address=full_address,
                event_url=event_url,
            ),
        )
    return result


async def notify_announcement_published(
    pipeline: NotificationPipeline,
    announcement: Announcement,
    *,
    created_at: datetime | None = None,
) -> ActionResult[int]:
    audience = await to_thread.run_sync(
        pipeline.audience.resolve_tenants_for_buildings, announcement.building_ids
    )
    if not audience.success:
        return ActionResult.fail(audience.error or "Failed to resolve tenants")

    stamp = created_at or now_in_app_timezone()
    built = _build_records(
        audience.data or [],
        lambda recipient: build_announcement_notification(
            user_id=recipient.user_id,
            announcement_id=announcement.id,
            building_id=recipient.building_id,
            title=announcement.title,
            description=announcement.message,
            created_at=stamp,
            is_urgent=announcement.is_urgent,
        ),
    )
    if not built.success:
        return ActionResult.fail(built.error)

    result = ActionResult.ok(0)
    if built.data:
        result = await _persist_and_dispatch(pipeline, built.data, channels={CHANNEL_SMS})

    announcement_url = pipeline.absolute_url(f"/dashboard/announcements/{announcement.id}")
    for building_id in dict.fromkeys(announcement.building_ids):
        await _email_building(
            pipeline,
            building_id,
            lambda full_address: build_announcement_email(
                locale=pipeline.default_locale,
                title=announcement.title,
                message=announcement.message,
                full_address=full_address,
                announcement_url=announcement_url,
            ),
        )
    return result


async def notify_direct_message(
    pipeline: NotificationPipeline,
    *,
    sender_id: str,
    recipient_ids: Iterable[str],
    title: str,
    body: str,
    url: str | None = None,
    created_at: datetime | None = None,
) -> ActionResult[int]:
    """Notify each recipient of a new message on every opted-in channel."""

    user_ids = [user_id for user_id in dict.fromkeys(recipient_ids) if user_id != sender_id]
    if not user_ids:
        return ActionResult.ok(0)

    stamp = created_at or now_in_app_timezone()
    built = _build_records(
        [Recipient(user_id=user_id) for user_id in user_ids],
        lambda recipient: build_message_notification(
            user_id=recipient.user_id,
            sender_id=sender_id,
            title=title,
            description=body,
            created_at=stamp,
            url=url,
        ),
    )
    if not built.success:
        return ActionResult.fail(built.error)
    return await _persist_and_dispatch(pipeline, built.data, channels=ALL_CHANNELS)


__all__ = [
    "NotificationPipeline",
    "notify_announcement_published",
    "notify_calendar_event_created",
    "notify_direct_message",
    "notify_poll_published",
]
