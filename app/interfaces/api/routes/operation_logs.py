"""Routes for inspecting operation log entries."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.application.use_cases import list_operation_logs as list_operation_logs_uc
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user_id
from app.interfaces.api.schemas import OperationLogRead

router = APIRouter(prefix="/operation-logs", tags=["operation_logs"])


@router.get("/", response_model=list[OperationLogRead])
def list_operation_logs(
    action: str | None = None,
    status: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    _: str = Depends(get_current_user_id),
) -> list[OperationLogRead]:
    """Return the newest operation log entries, optionally filtered."""

    entries = list_operation_logs_uc(db, action=action, status=status, limit=limit)
    return [OperationLogRead.model_validate(entry) for entry in entries]


__all__ = ["router"]
