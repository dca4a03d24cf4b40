"""Tests for batched notification persistence."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.notifications import NotificationStore, build_notification
from app.domain.entities import LOG_STATUS_FAIL, LOG_STATUS_SUCCESS, NotificationType
from app.infrastructure.repositories import NotificationRepository

CREATED_AT = datetime(2024, 5, 1, 12, 0)


class CountingWriter:
    """Writer that records batch sizes and fails on the configured call."""

    def __init__(self, fail_on_call: int | None = None) -> None:
        self.batches: list[int] = []
        self.fail_on_call = fail_on_call

    def insert_many(self, notifications) -> int:
        if self.fail_on_call is not None and len(self.batches) + 1 == self.fail_on_call:
            self.batches.append(-len(notifications))
            raise SQLAlchemyError("insert payload rejected")
        self.batches.append(len(notifications))
        return len(notifications)


def _records(count: int, *, type=NotificationType.ANNOUNCEMENT):
    return [
        build_notification(
            user_id=f"user-{index}",
            type=type,
            action_token="notifications.actions.notificationActionPollPublished",
            title="Poll",
            description="<p>Vote now</p>",
            created_at=CREATED_AT,
        )
        for index in range(count)
    ]


@pytest.mark.parametrize(
    ("count", "expected_batches"),
    [(1, [1]), (500, [500]), (501, [500, 1]), (1201, [500, 500, 201])],
)
def test_emit_splits_records_into_batches(operation_log, count, expected_batches):
    """Records are inserted in sequential batches of at most 500 rows."""

    writer = CountingWriter()
    result = NotificationStore(writer, operation_log).emit(_records(count))

    assert result.success is True
    assert result.inserted_count == count
    assert writer.batches == expected_batches


def test_emit_with_no_records_is_a_noop(operation_log, log_sink):
    writer = CountingWriter()

    result = NotificationStore(writer, operation_log).emit([])

    assert result.success is True
    assert result.inserted_count == 0
    assert writer.batches == []
    assert log_sink.entries == []


def test_emit_stops_on_first_failing_batch(operation_log, log_sink):
    """A failure in batch 2 of 3 reports the first batch and skips the third."""

    writer = CountingWriter(fail_on_call=2)

    result = NotificationStore(writer, operation_log).emit(_records(1200))

    assert result.success is False
    assert result.inserted_count == 500
    assert "insert payload rejected" in result.error
    assert writer.batches == [500, -500]
    assert log_sink.actions(LOG_STATUS_FAIL) == ["emitNotificationsInsert"]
    failure = log_sink.entries[-1]
    assert failure.payload["count"] == 500
    assert failure.payload["inserted"] == 500


def test_emit_logs_success_with_count_and_batches(operation_log, log_sink):
    NotificationStore(CountingWriter(), operation_log, batch_size=2).emit(_records(5))

    assert log_sink.actions(LOG_STATUS_SUCCESS) == ["emitNotifications"]
    assert log_sink.entries[0].payload == {"count": 5, "batches": 3}
    assert log_sink.entries[0].duration_ms >= 0


def test_emit_rejects_records_missing_required_fields(operation_log, log_sink):
    records = _records(2)
    records[1].action_token = ""
    writer = CountingWriter()

    result = NotificationStore(writer, operation_log).emit(records)

    assert result.success is False
    assert result.inserted_count == 0
    assert "action_token" in result.error
    assert writer.batches == []
    assert log_sink.actions(LOG_STATUS_FAIL) == ["emitNotifications"]


def test_emit_persists_type_literal(session, operation_log):
    """The persisted ``type`` column holds the value, never the label."""

    store = NotificationStore(NotificationRepository(session), operation_log)

    result = store.emit(_records(2, type=NotificationType.REMINDER))

    assert result.success is True
    rows = session.execute(text("SELECT type FROM notifications")).scalars().all()
    assert rows == ["reminder", "reminder"]
    assert NotificationType.REMINDER.label == "Reminder"


def test_emit_twice_appends_new_rows(session, operation_log):
    """Re-emitting the same records creates a second, independent set of rows."""

    store = NotificationStore(NotificationRepository(session), operation_log)
    records = _records(3)

    store.emit(records)
    store.emit(records)

    ids = session.execute(text("SELECT id FROM notifications")).scalars().all()
    assert len(ids) == 6
    assert len(set(ids)) == 6


def test_emit_result_survives_failing_log_sink(failing_operation_log, caplog):
    writer = CountingWriter()

    with caplog.at_level("ERROR"):
        result = NotificationStore(writer, failing_operation_log).emit(_records(3))

    assert result.success is True
    assert result.inserted_count == 3
    assert "Failed to write operation log entry" in caplog.text


def test_store_rejects_non_positive_batch_size(operation_log):
    with pytest.raises(ValueError):
        NotificationStore(CountingWriter(), operation_log, batch_size=0)
