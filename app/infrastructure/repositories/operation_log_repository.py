"""Persistence layer for operation log records."""

from __future__ import annotations

from collections.abc import Callable
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import OperationLogEntry
from app.infrastructure.models import OperationLogModel
from app.utils import from_storage_datetime, to_storage_datetime


class OperationLogRepository:
    """Append and query :class:`OperationLogEntry` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, entry: OperationLogEntry) -> OperationLogEntry:
        model = OperationLogModel()
        self._apply_entity_to_model(model, entry)
        try:
            self.session.add(model)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def list(
        self,
        *,
        action: str | None = None,
        status: str | None = None,
        limit: int = 100,
    ) -> list[OperationLogEntry]:
        """Return the newest entries, optionally filtered by action and status."""

        query = self.session.query(OperationLogModel)
        if action is not None:
            query = query.filter(OperationLogModel.action == action)
        if status is not None:
            query = query.filter(OperationLogModel.status == status)

        models: Iterable[OperationLogModel] = (
            query.order_by(OperationLogModel.created_at.desc()).limit(limit).all()
        )
        return [self._to_entity(model) for model in models]

    @staticmethod
    def _to_entity(model: OperationLogModel) -> OperationLogEntry:
        return OperationLogEntry(
            id=model.id,
            user_id=model.user_id,
            action=model.action,
            payload=dict(model.payload or {}),
            status=model.status,
            error=model.error or "",
            duration_ms=model.duration_ms or 0,
            type=model.type,
            created_at=from_storage_datetime(model.created_at),
        )

    @staticmethod
    def _apply_entity_to_model(model: OperationLogModel, entry: OperationLogEntry) -> None:
        model.user_id = entry.user_id
        model.action = entry.action
        model.payload = entry.payload
        model.status = entry.status
        model.error = entry.error or ""
        model.duration_ms = max(int(entry.duration_ms), 0)
        model.type = entry.type
        if entry.created_at is not None:
            model.created_at = to_storage_datetime(entry.created_at)


class SessionOperationLogSink:
    """Operation log sink writing each entry through its own short-lived session.

    A separate session keeps log writes from committing, or being rolled back
    with, the caller's unit of work.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def append(self, entry: OperationLogEntry) -> None:
        session = self._session_factory()
        try:
            OperationLogRepository(session).create(entry)
        finally:
            session.close()


__all__ = ["OperationLogRepository", "SessionOperationLogSink"]
