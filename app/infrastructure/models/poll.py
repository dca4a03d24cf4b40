"""SQLAlchemy models for polls and poll options."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import storage_now

from ._ids import new_id


class PollModel(Base):
    __tablename__ = "polls"

    id = Column(String(36), primary_key=True, default=new_id)
    building_id = Column(String(36), ForeignKey("buildings.id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="draft", index=True)
    starts_at = Column(DateTime(), nullable=True)
    closed_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)

    options = relationship(
        "PollOptionModel",
        back_populates="poll",
        order_by="PollOptionModel.sort_order",
    )


class PollOptionModel(Base):
    __tablename__ = "poll_options"
    __table_args__ = (
        UniqueConstraint("poll_id", "sort_order", name="uq_poll_options_poll_sort_order"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    poll_id = Column(String(36), ForeignKey("polls.id"), nullable=False, index=True)
    label = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False)

    poll = relationship("PollModel", back_populates="options")


__all__ = ["PollModel", "PollOptionModel"]
