"""Use cases for poll status transitions.

Database work runs in worker threads; only the notification flow runs on
the event loop.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import partial

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import (
    LOG_TYPE_ACTION,
    POLL_STATUS_ACTIVE,
    POLL_STATUS_ARCHIVED,
    POLL_STATUS_CLOSED,
    POLL_STATUSES,
    ActionResult,
    Poll,
)
from app.infrastructure.repositories import PollRepository
from app.utils import now_in_app_timezone

from ..notifications import NotificationPipeline, build_notification_pipeline, notify_poll_published
from ..operation_logs import OperationLog, elapsed_ms, start_timer
from .reorder_options import POLL_NOT_FOUND

logger = logging.getLogger(__name__)


def _closed_at_for(poll: Poll, status: str, now: datetime) -> datetime | None:
    if status == POLL_STATUS_CLOSED:
        return poll.closed_at if poll.status == POLL_STATUS_CLOSED and poll.closed_at else now
    if status == POLL_STATUS_ARCHIVED:
        return poll.closed_at
    return None


def _apply_status(
    repository: PollRepository, poll_id: str, status: str
) -> tuple[Poll | None, Poll | None]:
    """Return the poll before and after the change, or ``(None, None)``."""

    poll = repository.get(poll_id)
    if poll is None:
        return None, None
    updated = repository.update_status(
        poll_id,
        status=status,
        closed_at=_closed_at_for(poll, status, now_in_app_timezone()),
    )
    return poll, updated


async def update_poll_status(
    session: Session,
    *,
    poll_id: str,
    status: str,
    operation_log: OperationLog,
    pipeline: NotificationPipeline | None = None,
    user_id: str | None = None,
) -> ActionResult[Poll]:
    """Move a poll to ``status`` and notify tenants when it becomes active.

    Notification problems are logged and never fail the status change.
    """

    status = (status or "").strip().lower()
    if status not in POLL_STATUSES:
        return ActionResult.fail(f"Invalid poll status: {status!r}")

    started = start_timer()
    payload = {"poll_id": poll_id, "status": status}
    try:
        poll, updated = await to_thread.run_sync(
            _apply_status, PollRepository(session), poll_id, status
        )
    except SQLAlchemyError as exc:
        await to_thread.run_sync(
            partial(
                operation_log.failure,
                "updatePollStatus",
                error=str(exc),
                duration_ms=elapsed_ms(started),
                payload=payload,
                user_id=user_id,
            )
        )
        return ActionResult.fail(str(exc))

    if poll is None or updated is None:
        return ActionResult.fail(POLL_NOT_FOUND)

    await to_thread.run_sync(
        partial(
            operation_log.success,
            "updatePollStatus",
            duration_ms=elapsed_ms(started),
            payload={**payload, "previous_status": poll.status},
            user_id=user_id,
        )
    )

    if status == POLL_STATUS_ACTIVE and poll.status != POLL_STATUS_ACTIVE:
        await _notify_published(session, updated, operation_log, pipeline)

    return ActionResult.ok(updated)


async def _notify_published(
    session: Session,
    poll: Poll,
    operation_log: OperationLog,
    pipeline: NotificationPipeline | None,
) -> None:
    started = start_timer()
    try:
        pipeline = pipeline or build_notification_pipeline(session, operation_log=operation_log)
        result = await notify_poll_published(pipeline, poll)
    except Exception as exc:
        logger.exception("Failed to notify tenants about poll %s", poll.id)
        await to_thread.run_sync(
            partial(
                operation_log.failure,
                "notifyPollPublished",
                error=str(exc),
                duration_ms=elapsed_ms(started),
                payload={"poll_id": poll.id},
                type=LOG_TYPE_ACTION,
            )
        )
        return
    if not result.success:
        logger.warning("Poll %s notifications were not fully stored: %s", poll.id, result.error)


async def activate_scheduled_polls(
    session: Session,
    *,
    operation_log: OperationLog,
    now: datetime | None = None,
    pipeline: NotificationPipeline | None = None,
) -> ActionResult[list[Poll]]:
    """Activate every scheduled poll whose start time has passed."""

    try:
        due = await to_thread.run_sync(
            PollRepository(session).list_due_scheduled, now or now_in_app_timezone()
        )
    except SQLAlchemyError as exc:
        logger.error("Failed to load scheduled polls: %s", exc)
        return ActionResult.fail(str(exc))

    activated: list[Poll] = []
    for poll in due:
        result = await update_poll_status(
            session,
            poll_id=poll.id,
            status=POLL_STATUS_ACTIVE,
            operation_log=operation_log,
            pipeline=pipeline,
        )
        if result.success:
            activated.append(result.data)
        else:
            logger.warning("Could not activate poll %s: %s", poll.id, result.error)

    if activated:
        logger.info("Activated %d scheduled polls", len(activated))
    return ActionResult.ok(activated)


__all__ = ["activate_scheduled_polls", "update_poll_status"]
