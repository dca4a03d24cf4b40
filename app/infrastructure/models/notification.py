"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, String, Text

from app.infrastructure.database import Base

from ._ids import new_id


class NotificationModel(Base):
    """Database representation for user notifications.

    ``type`` holds the literal value of :class:`NotificationType`.
    """

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    action_token = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    url = Column(String(512), nullable=True)
    building_id = Column(String(36), nullable=True, index=True)
    poll_id = Column(String(36), nullable=True)
    announcement_id = Column(String(36), nullable=True)
    calendar_event_id = Column(String(36), nullable=True)
    calendar_event_type = Column(String(50), nullable=True)
    start_date_time = Column(DateTime(), nullable=True)
    end_date_time = Column(DateTime(), nullable=True)
    all_day = Column(Boolean, nullable=True)
    sender_id = Column(String(36), nullable=True)


__all__ = ["NotificationModel"]
