"""Read-only queries over tenants used to address notifications."""

from __future__ import annotations

from collections.abc import Collection, Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Recipient
from app.infrastructure.models import (
    ApartmentModel,
    BuildingModel,
    ClientModel,
    TenantModel,
)


class TenantRepository:
    """Resolve tenants and their contact preferences."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_recipients_for_buildings(
        self, building_ids: Collection[str]
    ) -> list[Recipient]:
        """Return one recipient per tenant user living in ``building_ids``.

        A user occupying several apartments is returned once, scoped to the
        first matching building.
        """

        ids = [building_id for building_id in building_ids if building_id]
        if not ids:
            return []

        rows = (
            self.session.query(TenantModel, ApartmentModel.building_id)
            .join(ApartmentModel, TenantModel.apartment_id == ApartmentModel.id)
            .filter(ApartmentModel.building_id.in_(ids))
            .filter(TenantModel.user_id.is_not(None))
            .order_by(TenantModel.created_at, TenantModel.id)
            .all()
        )

        recipients: dict[str, Recipient] = {}
        for tenant, building_id in rows:
            if tenant.user_id in recipients:
                continue
            recipients[tenant.user_id] = self._to_recipient(tenant, building_id)
        return list(recipients.values())

    def lookup_contacts_by_user_ids(
        self, user_ids: Sequence[str]
    ) -> dict[str, Recipient]:
        """Return contact details keyed by user id using a single query."""

        ids = list(dict.fromkeys(user_id for user_id in user_ids if user_id))
        if not ids:
            return {}

        rows = (
            self.session.query(TenantModel, ApartmentModel.building_id)
            .join(ApartmentModel, TenantModel.apartment_id == ApartmentModel.id)
            .filter(TenantModel.user_id.in_(ids))
            .order_by(TenantModel.created_at, TenantModel.id)
            .all()
        )

        contacts: dict[str, Recipient] = {}
        for tenant, building_id in rows:
            contacts.setdefault(tenant.user_id, self._to_recipient(tenant, building_id))
        return contacts

    def list_tenant_emails_for_buildings(
        self, building_ids: Collection[str]
    ) -> list[str]:
        """Return emails of tenants in ``building_ids`` who accept email."""

        ids = [building_id for building_id in building_ids if building_id]
        if not ids:
            return []

        rows = (
            self.session.query(TenantModel.email)
            .join(ApartmentModel, TenantModel.apartment_id == ApartmentModel.id)
            .filter(ApartmentModel.building_id.in_(ids))
            .filter(TenantModel.email.is_not(None))
            .filter(TenantModel.email_opt_in.is_(True))
            .order_by(TenantModel.created_at, TenantModel.id)
            .all()
        )
        return [email for (email,) in rows]

    def list_manager_emails_for_buildings(
        self, building_ids: Collection[str]
    ) -> list[str]:
        """Return emails of the clients managing ``building_ids``."""

        ids = [building_id for building_id in building_ids if building_id]
        if not ids:
            return []

        rows = (
            self.session.query(ClientModel.email)
            .join(BuildingModel, BuildingModel.client_id == ClientModel.id)
            .filter(BuildingModel.id.in_(ids))
            .filter(ClientModel.email.is_not(None))
            .order_by(ClientModel.created_at, ClientModel.id)
            .all()
        )
        return [email for (email,) in rows]

    @staticmethod
    def _to_recipient(tenant: TenantModel, building_id: str | None) -> Recipient:
        return Recipient(
            user_id=tenant.user_id,
            building_id=building_id,
            email=tenant.email,
            phone_number=tenant.phone_number,
            email_opt_in=bool(tenant.email_opt_in),
            sms_opt_in=bool(tenant.sms_opt_in),
            whatsapp_opt_in=bool(tenant.whatsapp_opt_in),
            viber_opt_in=bool(tenant.viber_opt_in),
        )


__all__ = ["TenantRepository"]
