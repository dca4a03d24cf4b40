"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationType
from app.infrastructure.models import NotificationModel
from app.utils import from_storage_datetime, to_storage_datetime


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert_many(self, notifications: Sequence[Notification]) -> int:
        """Insert ``notifications`` in a single commit and return the row count.

        Identifiers are always generated here; ids carried by the entities are
        ignored so re-emitting the same records appends new rows.
        """

        models = [self._to_model(notification) for notification in notifications]
        try:
            self.session.add_all(models)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return len(models)

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def set_read(self, notification_id: str, *, user_id: str, is_read: bool) -> int:
        try:
            affected = (
                self.session.query(NotificationModel)
                .filter(
                    NotificationModel.id == notification_id,
                    NotificationModel.user_id == user_id,
                )
                .update({NotificationModel.is_read: is_read}, synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return affected

    def mark_all_read(self, *, user_id: str) -> int:
        try:
            affected = (
                self.session.query(NotificationModel)
                .filter(
                    NotificationModel.user_id == user_id,
                    NotificationModel.is_read.is_(False),
                )
                .update({NotificationModel.is_read: True}, synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return affected

    def delete(self, notification_id: str, *, user_id: str) -> bool:
        """Delete a notification owned by ``user_id``.

        Returns ``False`` when no matching row exists.
        """

        try:
            affected = (
                self.session.query(NotificationModel)
                .filter(
                    NotificationModel.id == notification_id,
                    NotificationModel.user_id == user_id,
                )
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return affected > 0

    @staticmethod
    def _to_model(notification: Notification) -> NotificationModel:
        return NotificationModel(
            user_id=notification.user_id,
            type=NotificationType.parse(notification.type).value,
            action_token=notification.action_token,
            title=notification.title,
            description=notification.description,
            created_at=to_storage_datetime(notification.created_at),
            is_read=notification.is_read,
            url=notification.url,
            building_id=notification.building_id,
            poll_id=notification.poll_id,
            announcement_id=notification.announcement_id,
            calendar_event_id=notification.calendar_event_id,
            calendar_event_type=notification.calendar_event_type,
            start_date_time=to_storage_datetime(notification.start_date_time),
            end_date_time=to_storage_datetime(notification.end_date_time),
            all_day=notification.all_day,
            sender_id=notification.sender_id,
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType.parse(model.type),
            action_token=model.action_token,
            title=model.title,
            description=model.description,
            created_at=from_storage_datetime(model.created_at),
            is_read=bool(model.is_read),
            url=model.url,
            building_id=model.building_id,
            poll_id=model.poll_id,
            announcement_id=model.announcement_id,
            calendar_event_id=model.calendar_event_id,
            calendar_event_type=model.calendar_event_type,
            start_date_time=from_storage_datetime(model.start_date_time),
            end_date_time=from_storage_datetime(model.end_date_time),
            all_day=model.all_day,
            sender_id=model.sender_id,
        )


__all__ = ["NotificationRepository"]
