"""SQLAlchemy model for structured operation log entries."""

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.infrastructure.database import Base
from app.utils import storage_now

from ._ids import json_type, new_id


class OperationLogModel(Base):
    """Append-only record of a state-changing operation."""

    __tablename__ = "operation_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True, index=True)
    action = Column(String(120), nullable=False, index=True)
    payload = Column(json_type, nullable=True)
    status = Column(String(10), nullable=False)
    error = Column(Text, nullable=False, default="")
    duration_ms = Column(Integer, nullable=False, default=0)
    type = Column(String(20), nullable=False)
    created_at = Column(
        DateTime(), nullable=False, default=storage_now
    )


__all__ = ["OperationLogModel"]
