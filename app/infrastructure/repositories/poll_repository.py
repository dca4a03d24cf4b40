"""Persistence helpers for polls and poll options."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import POLL_STATUS_SCHEDULED, Poll, PollOption
from app.infrastructure.models import PollModel, PollOptionModel
from app.utils import from_storage_datetime, to_storage_datetime


class PollRepository:
    """Provide read and status-update operations for :class:`Poll` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, poll_id: str) -> Poll | None:
        model = self.session.get(PollModel, poll_id)
        return self._to_entity(model) if model else None

    def update_status(
        self,
        poll_id: str,
        *,
        status: str,
        closed_at: datetime | None,
    ) -> Poll | None:
        model = self.session.get(PollModel, poll_id)
        if model is None:
            return None
        model.status = status
        model.closed_at = to_storage_datetime(closed_at)
        try:
            self.session.add(model)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def list_due_scheduled(self, now: datetime) -> Sequence[Poll]:
        """Return scheduled polls whose ``starts_at`` is at or before ``now``."""

        query = (
            self.session.query(PollModel)
            .filter(PollModel.status == POLL_STATUS_SCHEDULED)
            .filter(PollModel.starts_at.is_not(None))
            .filter(PollModel.starts_at <= to_storage_datetime(now))
            .order_by(PollModel.starts_at.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: PollModel) -> Poll:
        return Poll(
            id=model.id,
            building_id=model.building_id,
            title=model.title,
            description=model.description,
            status=model.status,
            starts_at=from_storage_datetime(model.starts_at),
            closed_at=from_storage_datetime(model.closed_at),
            created_at=from_storage_datetime(model.created_at),
        )


class PollOptionRepository:
    """Single-statement operations over the ``poll_options`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_poll(self, poll_id: str) -> list[PollOption]:
        query = (
            self.session.query(PollOptionModel)
            .filter(PollOptionModel.poll_id == poll_id)
            .order_by(PollOptionModel.sort_order.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, option: PollOption) -> PollOption:
        model = PollOptionModel(
            poll_id=option.poll_id, label=option.label, sort_order=option.sort_order
        )
        try:
            self.session.add(model)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def update_sort_order(
        self,
        option_id: str,
        *,
        poll_id: str,
        sort_order: int,
        expected_sort_order: int | None = None,
    ) -> int:
        """Set ``sort_order`` of one option and return the affected row count.

        When ``expected_sort_order`` is given the row is only updated if it
        still holds that value.
        """

        query = self.session.query(PollOptionModel).filter(
            PollOptionModel.id == option_id,
            PollOptionModel.poll_id == poll_id,
        )
        if expected_sort_order is not None:
            query = query.filter(PollOptionModel.sort_order == expected_sort_order)
        try:
            affected = query.update(
                {PollOptionModel.sort_order: sort_order}, synchronize_session=False
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return affected

    @staticmethod
    def _to_entity(model: PollOptionModel) -> PollOption:
        return PollOption(
            id=model.id,
            poll_id=model.poll_id,
            label=model.label,
            sort_order=model.sort_order,
        )


__all__ = ["PollRepository", "PollOptionRepository"]
