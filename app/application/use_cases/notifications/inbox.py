"""Read-side and read-state operations over a user's notifications."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import ActionResult, Notification
from app.infrastructure.repositories import NotificationRepository

from ..operation_logs import OperationLog, elapsed_ms, start_timer

logger = logging.getLogger(__name__)

INVALID_NOTIFICATION_ID = "Invalid notification id"
NOTIFICATION_NOT_FOUND = "Notification not found"


def _is_valid_id(value: str) -> bool:
    try:
        UUID(str(value))
    except (TypeError, ValueError):
        return False
    return True


def list_notifications(
    session: Session,
    *,
    user_id: str,
    unread_only: bool = False,
    limit: int = 50,
) -> ActionResult[list[Notification]]:
    """Return the newest notifications addressed to ``user_id``."""

    try:
        items = NotificationRepository(session).list_for_user(
            user_id, unread_only=unread_only, limit=limit
        )
    except SQLAlchemyError as exc:
        logger.error("Failed to list notifications for %s: %s", user_id, exc)
        return ActionResult.fail(str(exc))
    return ActionResult.ok(list(items))


def set_notification_read(
    session: Session,
    operation_log: OperationLog,
    *,
    notification_id: str,
    user_id: str,
    is_read: bool = True,
) -> ActionResult[Notification]:
    """Toggle the read flag of one notification owned by ``user_id``.

    Fails with ``"Notification not found"`` when no notification of
    ``user_id`` matches.
    """

    payload = {"notification_id": notification_id, "is_read": is_read}
    if not _is_valid_id(notification_id):
        return ActionResult.fail(INVALID_NOTIFICATION_ID)

    started = start_timer()
    repository = NotificationRepository(session)
    try:
        affected = repository.set_read(notification_id, user_id=user_id, is_read=is_read)
    except SQLAlchemyError as exc:
        operation_log.failure(
            "setNotificationRead",
            error=str(exc),
            duration_ms=elapsed_ms(started),
            payload=payload,
            user_id=user_id,
        )
        return ActionResult.fail(str(exc))

    if affected != 1:
        operation_log.failure(
            "setNotificationRead",
            error=NOTIFICATION_NOT_FOUND,
            duration_ms=elapsed_ms(started),
            payload=payload,
            user_id=user_id,
        )
        return ActionResult.fail(NOTIFICATION_NOT_FOUND)

    operation_log.success(
        "setNotificationRead",
        duration_ms=elapsed_ms(started),
        payload=payload,
        user_id=user_id,
    )
    return ActionResult.ok(repository.get(notification_id))


def mark_all_notifications_read(
    session: Session, operation_log: OperationLog, *, user_id: str
) -> ActionResult[int]:
    started = start_timer()
    try:
        affected = NotificationRepository(session).mark_all_read(user_id=user_id)
    except SQLAlchemyError as exc:
        operation_log.failure(
            "markAllNotificationsRead",
            error=str(exc),
            duration_ms=elapsed_ms(started),
            user_id=user_id,
        )
        return ActionResult.fail(str(exc))

    operation_log.success(
        "markAllNotificationsRead",
        duration_ms=elapsed_ms(started),
        payload={"count": affected},
        user_id=user_id,
    )
    return ActionResult.ok(affected)


def delete_notification(
    session: Session,
    operation_log: OperationLog,
    *,
    notification_id: str,
    user_id: str,
) -> ActionResult[None]:
    if not _is_valid_id(notification_id):
        return ActionResult.fail(INVALID_NOTIFICATION_ID)

    started = start_timer()
    payload = {"notification_id": notification_id}
    try:
        deleted = NotificationRepository(session).delete(notification_id, user_id=user_id)
    except SQLAlchemyError as exc:
        operation_log.failure(
            "deleteNotification",
            error=str(exc),
            duration_ms=elapsed_ms(started),
            payload=payload,
            user_id=user_id,
        )
        return ActionResult.fail(str(exc))

    if not deleted:
        operation_log.failure(
            "deleteNotification",
            error=NOTIFICATION_NOT_FOUND,
            duration_ms=elapsed_ms(started),
            payload=payload,
            user_id=user_id,
        )
        return ActionResult.fail(NOTIFICATION_NOT_FOUND)

    operation_log.success(
        "deleteNotification",
        duration_ms=elapsed_ms(started),
        payload=payload,
        user_id=user_id,
    )
    return ActionResult.ok(None)


__all__ = [
    "INVALID_NOTIFICATION_ID",
    "NOTIFICATION_NOT_FOUND",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "set_notification_read",
]
