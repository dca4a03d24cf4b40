"""Routes for poll status transitions and option ordering."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases import OperationLog
from app.application.use_cases.notifications import NotificationPipeline
from app.application.use_cases.polls import (
    POLL_NOT_FOUND,
    activate_scheduled_polls as activate_scheduled_polls_uc,
    reorder_poll_options as reorder_poll_options_uc,
    update_poll_status as update_poll_status_uc,
)
from app.domain.entities import ActionResult
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import (
    get_current_user_id,
    get_notification_pipeline,
    get_operation_log,
)
from app.interfaces.api.schemas import (
    PollOptionOrderUpdate,
    PollOptionRead,
    PollRead,
    PollStatusUpdate,
    ScheduledPollsActivated,
)

router = APIRouter(prefix="/polls", tags=["polls"])


def _raise_for_failure(result: ActionResult) -> None:
    if result.success:
        return
    if result.error == POLL_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)


@router.post("/activate-scheduled", response_model=ScheduledPollsActivated)
async def activate_scheduled_polls(
    db: Session = Depends(get_db),
    _: str = Depends(get_current_user_id),
    operation_log: OperationLog = Depends(get_operation_log),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> ScheduledPollsActivated:
    """Activate scheduled polls whose start time has passed."""

    result = await activate_scheduled_polls_uc(
        db, operation_log=operation_log, pipeline=pipeline
    )
    _raise_for_failure(result)
    return ScheduledPollsActivated(
        activated=[PollRead.model_validate(poll) for poll in result.data]
    )


@router.post("/{poll_id}/status", response_model=PollRead)
async def update_poll_status(
    poll_id: str,
    payload: PollStatusUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    operation_log: OperationLog = Depends(get_operation_log),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> PollRead:
    """Change the status of a poll; activation notifies the building's tenants."""

    result = await update_poll_status_uc(
        db,
        poll_id=poll_id,
        status=payload.status,
        operation_log=operation_log,
        pipeline=pipeline,
        user_id=user_id,
    )
    _raise_for_failure(result)
    return PollRead.model_validate(result.data)


@router.put("/{poll_id}/options/order", response_model=list[PollOptionRead])
def reorder_poll_options(
    poll_id: str,
    payload: PollOptionOrderUpdate,
    db: Session = Depends(get_db),
    _: str = Depends(get_current_user_id),
    operation_log: OperationLog = Depends(get_operation_log),
) -> list[PollOptionRead]:
    result = reorder_poll_options_uc(
        db,
        poll_id=poll_id,
        ordered_ids=payload.option_ids,
        operation_log=operation_log,
    )
    _raise_for_failure(result)
    return [PollOptionRead.model_validate(option) for option in result.data]


__all__ = ["router"]
