"""Structured, best-effort logging of state-changing operations."""

from __future__ import annotations

import logging
import time
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Protocol

from sqlalchemy.orm import Session

from app.domain.entities import (
    LOG_STATUS_FAIL,
    LOG_STATUS_SUCCESS,
    LOG_TYPE_DB,
    OperationLogEntry,
)
from app.infrastructure.repositories import OperationLogRepository

logger = logging.getLogger(__name__)


class OperationLogSink(Protocol):
    def append(self, entry: OperationLogEntry) -> None: ...


def start_timer() -> float:
    """Return a monotonic start mark for :func:`elapsed_ms`."""

    return time.perf_counter()


def elapsed_ms(started: float) -> int:
    return max(int((time.perf_counter() - started) * 1000), 0)


def _json_safe(value: Any) -> Any:
    """Convert ``value`` into something the JSON payload column accepts."""

    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return _json_safe(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(item) for item in value]
    return str(value)


class OperationLog:
    """Record :class:`OperationLogEntry` objects without ever raising.

    Callers measure ``duration_ms`` from the start of their own operation.
    """

    def __init__(self, sink: OperationLogSink) -> None:
        self._sink = sink

    def record(self, entry: OperationLogEntry) -> None:
        try:
            entry.payload = _json_safe(entry.payload or {})
            self._sink.append(entry)
        except Exception:
            logger.exception(
                "Failed to write operation log entry for %s (%s)", entry.action, entry.status
            )

    def success(
        self,
        action: str,
        *,
        duration_ms: int,
        payload: Mapping[str, Any] | None = None,
        type: str = LOG_TYPE_DB,
        user_id: str | None = None,
    ) -> None:
        self.record(
            OperationLogEntry(
                action=action,
                status=LOG_STATUS_SUCCESS,
                type=type,
                duration_ms=duration_ms,
                error="",
                payload=dict(payload or {}),
                user_id=user_id,
            )
        )

    def failure(
        self,
        action: str,
        *,
        error: str,
        duration_ms: int,
        payload: Mapping[str, Any] | None = None,
        type: str = LOG_TYPE_DB,
        user_id: str | None = None,
    ) -> None:
        self.record(
            OperationLogEntry(
                action=action,
                status=LOG_STATUS_FAIL,
                type=type,
                duration_ms=duration_ms,
                error=error or "unknown error",
                payload=dict(payload or {}),
                user_id=user_id,
            )
        )


def list_operation_logs(
    session: Session,
    *,
    action: str | None = None,
    status: str | None = None,
    limit: int = 100,
) -> list[OperationLogEntry]:
    """Return the newest operation log entries, optionally filtered."""

    repository = OperationLogRepository(session)
    return repository.list(action=action, status=status, limit=limit)


__all__ = [
    "OperationLog",
    "OperationLogSink",
    "elapsed_ms",
    "list_operation_logs",
    "start_timer",
]
