"""Resolve which users and addresses a building-scoped event reaches."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable

from sqlalchemy.exc import SQLAlchemyError

from app.domain.entities import ActionResult, Recipient
from app.infrastructure.repositories import BuildingRepository, TenantRepository

from ..operation_logs import OperationLog, elapsed_ms, start_timer

logger = logging.getLogger(__name__)


def _unique_emails(addresses: Iterable[str | None]) -> list[str]:
    """Deduplicate ``addresses`` case-insensitively keeping first occurrences."""

    unique: list[str] = []
    seen: set[str] = set()
    for address in addresses:
        cleaned = (address or "").strip()
        if not cleaned or "@" not in cleaned:
            continue
        key = cleaned.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(cleaned)
    return unique


class AudienceResolver:
    """Map building identifiers to tenant recipients and notification emails."""

    def __init__(
        self,
        tenants: TenantRepository,
        buildings: BuildingRepository,
        operation_log: OperationLog,
    ) -> None:
        self._tenants = tenants
        self._buildings = buildings
        self._operation_log = operation_log

    def resolve_tenants_for_buildings(
        self, building_ids: Collection[str]
    ) -> ActionResult[list[Recipient]]:
        ids = sorted({building_id for building_id in building_ids if building_id})
        if not ids:
            return ActionResult.ok([])

        started = start_timer()
        try:
            recipients = self._tenants.list_recipients_for_buildings(ids)
        except SQLAlchemyError as exc:
            logger.error("Failed to resolve tenants for buildings %s: %s", ids, exc)
            self._operation_log.failure(
                "resolveTenantsForBuildings",
                error=str(exc),
                duration_ms=elapsed_ms(started),
                payload={"building_ids": ids},
            )
            return ActionResult.fail(str(exc))

        logger.debug("Resolved %d tenants for buildings %s", len(recipients), ids)
        return ActionResult.ok(recipients)

    def resolve_notification_emails_for_buildings(
        self, building_ids: Collection[str]
    ) -> ActionResult[list[str]]:
        """Return opted-in tenant emails plus the managing clients' emails."""

        ids = sorted({building_id for building_id in building_ids if building_id})
        if not ids:
            return ActionResult.ok([])

        started = start_timer()
        try:
            tenant_emails = self._tenants.list_tenant_emails_for_buildings(ids)
            manager_emails = self._tenants.list_manager_emails_for_buildings(ids)
        except SQLAlchemyError as exc:
            logger.error("Failed to resolve notification emails for %s: %s", ids, exc)
            self._operation_log.failure(
                "resolveNotificationEmailsForBuildings",
                error=str(exc),
                duration_ms=elapsed_ms(started),
                payload={"building_ids": ids},
            )
            return ActionResult.fail(str(exc))

        return ActionResult.ok(_unique_emails([*tenant_emails, *manager_emails]))

    def resolve_building_address(self, building_id: str) -> ActionResult[str | None]:
        if not building_id:
            return ActionResult.ok(None)

        started = start_timer()
        try:
            building = self._buildings.get(building_id)
        except SQLAlchemyError as exc:
            self._operation_log.failure(
                "resolveBuildingAddress",
                error=str(exc),
                duration_ms=elapsed_ms(started),
                payload={"building_id": building_id},
            )
            return ActionResult.fail(str(exc))

        if building is None:
            return ActionResult.ok(None)
        return ActionResult.ok(building.address.format() or None)


__all__ = ["AudienceResolver"]
