"""Wiring of the notification pipeline against a database session."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.infrastructure.email import SendGridEmailTransport
from app.infrastructure.repositories import (
    BuildingRepository,
    NotificationRepository,
    TenantRepository,
)
from app.infrastructure.sms import TwilioMessageClient

from ..operation_logs import OperationLog
from .audience import AudienceResolver
from .dispatcher import ChannelDispatcher
from .events import NotificationPipeline
from .store import NotificationStore


def build_notification_pipeline(
    session: Session,
    *,
    operation_log: OperationLog,
    settings: Settings | None = None,
) -> NotificationPipeline:
    """Return a pipeline whose channels follow the configured providers."""

    settings = settings or get_settings()
    tenants = TenantRepository(session)
    return NotificationPipeline(
        audience=AudienceResolver(tenants, BuildingRepository(session), operation_log),
        store=NotificationStore(
            NotificationRepository(session),
            operation_log,
            batch_size=settings.notification_batch_size,
        ),
        dispatcher=ChannelDispatcher(
            tenants,
            operation_log,
            email_transport=SendGridEmailTransport.from_settings(settings),
            message_transport=TwilioMessageClient.from_settings(settings),
            locale=settings.default_locale,
        ),
        operation_log=operation_log,
        app_base_url=settings.app_base_url,
        default_locale=settings.default_locale,
    )


__all__ = ["build_notification_pipeline"]
