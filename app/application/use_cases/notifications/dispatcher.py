"""Per-recipient delivery of notifications over email and SMS/WhatsApp."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Collection, Mapping, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Protocol

from anyio import to_thread

from app.domain.entities import (
    LOG_TYPE_EMAIL,
    LOG_TYPE_EXTERNAL,
    DeliveryResult,
    FanOutReport,
    Notification,
    NotificationType,
    Recipient,
)
from app.infrastructure.email_templates import EmailContent, build_notification_digest_email
from app.utils import normalize_phone_number

from ..operation_logs import OperationLog, elapsed_ms, start_timer
from .formatters import consolidate, group_by_user

logger = logging.getLogger(__name__)

CHANNEL_SMS = "sms"
CHANNEL_EMAIL = "email"
ALL_CHANNELS = frozenset({CHANNEL_SMS, CHANNEL_EMAIL})


class ContactResolver(Protocol):
    def lookup_contacts_by_user_ids(self, user_ids: Sequence[str]) -> Mapping[str, Recipient]: ...


class EmailTransport(Protocol):
    def send(self, to: Sequence[str], subject: str, html: str) -> DeliveryResult: ...


class MessageTransport(Protocol):
    def send(
        self, to: str, title: str, body: str, notification_type: NotificationType
    ) -> DeliveryResult: ...


@dataclass
class _UserOutcome:
    sms_sent: int = 0
    sms_errors: int = 0
    sms_skipped: int = 0
    email_sent: int = 0
    email_errors: int = 0
    email_skipped: int = 0
    errors: list[str] = field(default_factory=list)


def _merge(report: FanOutReport, outcome: _UserOutcome) -> None:
    report.sms_sent += outcome.sms_sent
    report.sms_errors += outcome.sms_errors
    report.sms_skipped += outcome.sms_skipped
    report.email_sent += outcome.email_sent
    report.email_errors += outcome.email_errors
    report.email_skipped += outcome.email_skipped
    report.errors.extend(outcome.errors)

class ChannelDispatcher:
    """Fan persisted notifications out to each recipient's opted-in channels.

    Recipients are processed as independent tasks; a failure for one
    recipient is counted and logged without affecting the others. Provider
    and store failures never raise out of :meth:`fan_out` or
    :meth:`send_bulk_email`. Contact lookups, provider calls and log writes
    run in worker threads.
    """

    def __init__(
        self,
        contacts: ContactResolver,
        operation_log: OperationLog,
        *,
        email_transport: EmailTransport | None = None,
        message_transport: MessageTransport | None = None,
        locale: str = "en",
    ) -> None:
        self._contacts = contacts
        self._operation_log = operation_log
        self._email_transport = email_transport
        self._message_transport = message_transport
        self._locale = locale

    async def fan_out(
        self,
        records: Sequence[Notification],
        *,
        channels: Collection[str] | None = None,
    ) -> FanOutReport:
        """Deliver ``records`` over ``channels`` (every channel when ``None``).

        Raises :class:`TypeError` when ``channels`` is a single string.
        """

        if isinstance(channels, str):
            raise TypeError("channels must be a collection of channel names, not a string")

        report = FanOutReport()
        if not records:
            return report

        selected = ALL_CHANNELS if channels is None else frozenset(channels) & ALL_CHANNELS
        started = start_timer()
        grouped = group_by_user(records)
        report.users = len(grouped)
        user_ids = list(grouped)

        try:
            contacts = await to_thread.run_sync(
                self._contacts.lookup_contacts_by_user_ids, user_ids
            )
        except Exception as exc:
            logger.exception("Failed to load contacts for %d users", len(grouped))
            await self._log(
                self._operation_log.failure,
                "fanOutNotifications",
                error=str(exc),
                duration_ms=elapsed_ms(started),
                payload={"users": len(grouped), "stage": "contacts"},
                type=LOG_TYPE_EXTERNAL,
            )
            report.errors.append(str(exc))
            return report

        outcomes = await asyncio.gather(
            *(
                self._deliver(user_id, grouped[user_id], contacts.get(user_id), selected)
                for user_id in user_ids
            ),
            return_exceptions=True,
        )

        for user_id, outcome in zip(user_ids, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("Unexpected delivery failure for user %s: %s", user_id, outcome)
                report.errors.append(f"{user_id}: {outcome}")
                continue
            _merge(report, outcome)

        await self._log(
            self._operation_log.success,
            "fanOutNotifications",
            duration_ms=elapsed_ms(started),
            payload=report.as_payload(),
            type=LOG_TYPE_EXTERNAL,
        )
        logger.info(
            "Fan-out finished for %d users: %d sms sent, %d emails sent",
            report.users,
            report.sms_sent,
            report.email_sent,
        )
        return report

    async def send_bulk_email(
        self, addresses: Sequence[str], content: EmailContent
    ) -> FanOutReport:
        """Send ``content`` to every address as a separate, separately logged message."""

        report = FanOutReport()
        if self._email_transport is None or not addresses:
            return report

        started = start_timer()
        results = await asyncio.gather(
            *(self._send_bulk_one(address, content) for address in addresses),
            return_exceptions=True,
        )
        for address, result in zip(addresses, results):
            if isinstance(result, BaseException):
                report.email_errors += 1
                report.errors.append(f"{address}: {result}")
            elif result.ok:
                report.email_sent += 1
            else:
                report.email_errors += 1
                report.errors.append(f"{address}: {result.error}")

        await self._log(
            self._operation_log.success,
            "sendBulkEmail",
            duration_ms=elapsed_ms(started),
            payload={
                "subject": content.subject,
                "count": len(addresses),
                "sent": report.email_sent,
                "errors": report.email_errors,
            },
            type=LOG_TYPE_EMAIL,
        )
        return report

    async def _send_bulk_one(self, address: str, content: EmailContent) -> DeliveryResult:
        started = start_timer()
        payload = {"to": address, "subject": content.subject}
        try:
            result = await self._send_email_to(address, content)
        except Exception as exc:
            result = DeliveryResult(ok=False, error=str(exc) or type(exc).__name__)

        if not result.ok:
            error = result.error or "unknown error"
            logger.warning("Email to %s failed: %s", address, error)
            await self._log(
                self._operation_log.failure,
                "sendEmail",
                error=error,
                duration_ms=elapsed_ms(started),
                payload=payload,
                type=LOG_TYPE_EMAIL,
            )
            return result

        await self._log(
            self._operation_log.success,
            "sendEmail",
            duration_ms=elapsed_ms(started),
            payload={**payload, "provider_id": result.id},
            type=LOG_TYPE_EMAIL,
        )
        return result

    async def _deliver(
        self,
        user_id: str,
        items: Sequence[Notification],
        contact: Recipient | None,
        channels: frozenset[str],
    ) -> _UserOutcome:
        outcome = _UserOutcome()
        if CHANNEL_SMS in channels and self._message_transport is not None:
            await self._deliver_message(user_id, items, contact, outcome)
        if CHANNEL_EMAIL in channels and self._email_transport is not None:
            await self._deliver_email(user_id, items, contact, outcome)
        return outcome

    async def _deliver_message(
        self,
        user_id: str,
        items: Sequence[Notification],
        contact: Recipient | None,
        outcome: _UserOutcome,
    ) -> None:
        if contact is None or not contact.sms_opt_in or not contact.phone_number:
            outcome.sms_skipped += 1
            return

        started = start_timer()
        payload = {"user_id": user_id, "count": len(items)}
        try:
            phone_number = normalize_phone_number(contact.phone_number)
            message = consolidate(items)
            result = await to_thread.run_sync(
                partial(
                    self._message_transport.send,
                    phone_number,
                    message.title,
                    message.body,
                    message.type,
                )
            )
        except Exception as exc:
            await self._record_failure(outcome, "fanOutSms", user_id, exc, started, payload)
            outcome.sms_errors += 1
            return

        outcome.sms_sent += 1
        await self._log(
            self._operation_log.success,
            "fanOutSms",
            duration_ms=elapsed_ms(started),
            payload={**payload, "provider_id": result.id, "provider_status": result.status},
            type=LOG_TYPE_EXTERNAL,
            user_id=user_id,
        )

    async def _deliver_email(
        self,
        user_id: str,
        items: Sequence[Notification],
        contact: Recipient | None,
        outcome: _UserOutcome,
    ) -> None:
        if contact is None or not contact.email_opt_in or not contact.email:
            outcome.email_skipped += 1
            return

        started = start_timer()
        payload = {"user_id": user_id, "count": len(items)}
        try:
            content = build_notification_digest_email(items, locale=self._locale)
            result = await self._send_email_to(contact.email, content)
        except Exception as exc:
            await self._record_failure(outcome, "fanOutEmail", user_id, exc, started, payload)
            outcome.email_errors += 1
            return

        if not result.ok:
            await self._record_failure(
                outcome, "fanOutEmail", user_id, result.error, started, payload
            )
            outcome.email_errors += 1
            return

        outcome.email_sent += 1
        await self._log(
            self._operation_log.success,
            "fanOutEmail",
            duration_ms=elapsed_ms(started),
            payload={**payload, "provider_id": result.id},
            type=LOG_TYPE_EMAIL,
            user_id=user_id,
        )

    async def _send_email_to(self, address: str, content: EmailContent) -> DeliveryResult:
        return await to_thread.run_sync(
            partial(self._email_transport.send, [address], content.subject, content.html)
        )

    async def _log(self, write: Callable[..., None], action: str, **fields: Any) -> None:
        await to_thread.run_sync(partial(write, action, **fields))

    async def _record_failure(
        self,
        outcome: _UserOutcome,
        action: str,
        user_id: str,
        error: object,
        started: float,
        payload: dict,
    ) -> None:
        message = str(error) if error else "unknown error"
        logger.warning("%s failed for user %s: %s", action, user_id, message)
        outcome.errors.append(f"{user_id}: {message}")
        await self._log(
            self._operation_log.failure,
            action,
            error=message,
            duration_ms=elapsed_ms(started),
            payload=payload,
            type=LOG_TYPE_EMAIL if action == "fanOutEmail" else LOG_TYPE_EXTERNAL,
            user_id=user_id,
        )


__all__ = [
    "ALL_CHANNELS",
    "CHANNEL_EMAIL",
    "CHANNEL_SMS",
    "ChannelDispatcher",
    "ContactResolver",
    "EmailTransport",
    "MessageTransport",
]
