"""Batched persistence of notification records."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError

from app.domain.entities import EmitResult, Notification, NotificationType

from ..operation_logs import OperationLog, elapsed_ms, start_timer

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


class NotificationWriter(Protocol):
    def insert_many(self, notifications: Sequence[Notification]) -> int: ...


def _validation_error(records: Sequence[Notification]) -> str | None:
    for index, record in enumerate(records):
        if not record.user_id:
            return f"Notification at position {index} has no user_id"
        if not record.action_token:
            return f"Notification at position {index} has no action_token"
        try:
            NotificationType.parse(record.type)
        except ValueError as exc:
            return f"Notification at position {index}: {exc}"
    return None


class NotificationStore:
    """Insert notifications in sequential, bounded batches.

    The first failing batch stops the emission; batches committed before it
    stay committed and are reported through ``EmitResult.inserted_count``.
    Emission always appends: the same records emitted twice produce two
    sets of rows.
    """

    def __init__(
        self,
        writer: NotificationWriter,
        operation_log: OperationLog,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._writer = writer
        self._operation_log = operation_log
        self._batch_size = batch_size

    def emit(self, records: Sequence[Notification]) -> EmitResult:
        if not records:
            return EmitResult(success=True, inserted_count=0)

        started = start_timer()
        logger.info("Emitting %d notifications", len(records))

        error = _validation_error(records)
        if error is not None:
            self._operation_log.failure(
                "emitNotifications",
                error=error,
                duration_ms=elapsed_ms(started),
                payload={"count": len(records)},
            )
            return EmitResult(success=False, inserted_count=0, error=error)

        inserted = 0
        batches = 0
        for offset in range(0, len(records), self._batch_size):
            batch = records[offset : offset + self._batch_size]
            try:
                self._writer.insert_many(batch)
            except SQLAlchemyError as exc:
                logger.error(
                    "Error inserting notification batch %d (%d rows): %s",
                    batches + 1,
                    len(batch),
                    exc,
                )
                self._operation_log.failure(
                    "emitNotificationsInsert",
                    error=str(exc),
                    duration_ms=elapsed_ms(started),
                    payload={
                        "count": len(batch),
                        "batch": batches + 1,
                        "inserted": inserted,
                        "total": len(records),
                    },
                )
                return EmitResult(success=False, inserted_count=inserted, error=str(exc))
            inserted += len(batch)
            batches += 1
            logger.debug("Inserted batch of %d notifications", len(batch))

        self._operation_log.success(
            "emitNotifications",
            duration_ms=elapsed_ms(started),
            payload={"count": inserted, "batches": batches},
        )
        return EmitResult(success=True, inserted_count=inserted)


__all__ = ["DEFAULT_BATCH_SIZE", "NotificationStore", "NotificationWriter"]
