"""Endpoints for reading and managing a user's notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.application.use_cases import OperationLog
from app.application.use_cases.notifications import (
    NOTIFICATION_NOT_FOUND,
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_notifications_read_uc,
    set_notification_read as set_notification_read_uc,
)
from app.domain.entities import ActionResult
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user_id, get_operation_log
from app.interfaces.api.schemas import (
    NotificationRead,
    NotificationReadUpdate,
    NotificationsMarkedRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _raise_for_failure(result: ActionResult) -> None:
    if result.success:
        return
    if result.error == NOTIFICATION_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> list[NotificationRead]:
    """Return the most recent notifications for the current user."""

    result = list_notifications_uc(db, user_id=user_id, unread_only=unread_only, limit=limit)
    _raise_for_failure(result)
    return [NotificationRead.model_validate(item) for item in result.data]


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def update_notification_read(
    notification_id: str,
    payload: NotificationReadUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    operation_log: OperationLog = Depends(get_operation_log),
) -> NotificationRead:
    result = set_notification_read_uc(
        db,
        operation_log,
        notification_id=notification_id,
        user_id=user_id,
        is_read=payload.is_read,
    )
    _raise_for_failure(result)
    return NotificationRead.model_validate(result.data)


@router.post("/read-all", response_model=NotificationsMarkedRead)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    operation_log: OperationLog = Depends(get_operation_log),
) -> NotificationsMarkedRead:
    result = mark_all_notifications_read_uc(db, operation_log, user_id=user_id)
    _raise_for_failure(result)
    return NotificationsMarkedRead(updated=result.data)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    operation_log: OperationLog = Depends(get_operation_log),
) -> Response:
    """Delete the notification identified by ``notification_id``."""

    result = delete_notification_uc(
        db, operation_log, notification_id=notification_id, user_id=user_id
    )
    _raise_for_failure(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
