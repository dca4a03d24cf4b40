"""FastAPI dependency utilities."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases import OperationLog, build_notification_pipeline
from app.application.use_cases.notifications import NotificationPipeline
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.repositories import SessionOperationLogSink


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the viewer identifier forwarded by the authentication gateway."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return user_id


def get_operation_log() -> OperationLog:
    """Return an operation log writing through its own sessions."""

    return OperationLog(SessionOperationLogSink(SessionLocal))


def get_notification_pipeline(
    db: Session = Depends(get_db),
    operation_log: OperationLog = Depends(get_operation_log),
) -> NotificationPipeline:
    return build_notification_pipeline(db, operation_log=operation_log)
