from fastapi import FastAPI

from .notifications import router as notifications_router
from .operation_logs import router as operation_logs_router
from .polls import router as polls_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notifications_router)
    app.include_router(polls_router)
    app.include_router(operation_logs_router)
