"""Tests for building audience resolution."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.exc import OperationalError

from app.application.use_cases.notifications import AudienceResolver
from app.domain.entities import LOG_STATUS_FAIL
from app.infrastructure.models import ApartmentModel, BuildingModel, TenantModel
from app.infrastructure.repositories import BuildingRepository, TenantRepository


def _resolver(session, operation_log) -> AudienceResolver:
    return AudienceResolver(TenantRepository(session), BuildingRepository(session), operation_log)


def test_resolves_every_tenant_of_the_building(session, operation_log, building_with_tenants):
    result = _resolver(session, operation_log).resolve_tenants_for_buildings(
        {building_with_tenants["building_id"]}
    )

    assert result.success is True
    assert [recipient.user_id for recipient in result.data] == ["ana", "ben", "cleo"]
    ana = result.data[0]
    assert ana.building_id == building_with_tenants["building_id"]
    assert ana.phone_number == "+381 64 111 2222"
    assert ana.sms_opt_in is True
    assert result.data[2].sms_opt_in is False


def test_empty_building_set_yields_no_recipients(operation_log):
    class UnusedRepository:
        def __getattr__(self, name):
            raise AssertionError("the store must not be queried")

    resolver = AudienceResolver(UnusedRepository(), UnusedRepository(), operation_log)

    result = resolver.resolve_tenants_for_buildings(set())

    assert result.success is True
    assert result.data == []


def test_tenant_with_several_apartments_is_returned_once(session, operation_log, building_with_tenants):
    building_id = building_with_tenants["building_id"]
    extra = ApartmentModel(building_id=building_id, apartment_number="3")
    session.add(extra)
    session.flush()
    session.add(
        TenantModel(
            user_id="ana",
            apartment_id=extra.id,
            sms_opt_in=False,
            created_at=datetime(2024, 2, 1, 9, 0),
        )
    )
    session.commit()

    result = _resolver(session, operation_log).resolve_tenants_for_buildings([building_id])

    assert [recipient.user_id for recipient in result.data] == ["ana", "ben", "cleo"]
    assert result.data[0].sms_opt_in is True


def test_tenants_of_other_buildings_are_excluded(session, operation_log, building_with_tenants):
    other = BuildingModel(street_number="1", street_address="Side Road", city="Subotica")
    session.add(other)
    session.flush()
    apartment = ApartmentModel(building_id=other.id, apartment_number="9")
    session.add(apartment)
    session.flush()
    session.add(TenantModel(user_id="zoe", apartment_id=apartment.id))
    session.commit()

    result = _resolver(session, operation_log).resolve_tenants_for_buildings(
        [building_with_tenants["building_id"]]
    )

    assert "zoe" not in [recipient.user_id for recipient in result.data]


def test_notification_emails_include_managers_without_duplicates(
    session, operation_log, building_with_tenants
):
    building_id = building_with_tenants["building_id"]
    apartment = session.query(ApartmentModel).filter_by(building_id=building_id).first()
    session.add(
        TenantModel(
            user_id="dup",
            apartment_id=apartment.id,
            email="MANAGER@acme.test",
            email_opt_in=True,
            created_at=datetime(2024, 3, 1, 9, 0),
        )
    )
    session.commit()

    result = _resolver(session, operation_log).resolve_notification_emails_for_buildings(
        [building_id]
    )

    assert result.success is True
    assert result.data == ["ana@example.com", "ben@example.com", "MANAGER@acme.test"]


def test_resolve_building_address(session, operation_log, building_with_tenants):
    resolver = _resolver(session, operation_log)

    found = resolver.resolve_building_address(building_with_tenants["building_id"])
    missing = resolver.resolve_building_address("missing")

    assert found.data == "12 Main Street, Novi Sad"
    assert missing.success is True
    assert missing.data is None


def test_store_errors_become_failed_results(session, operation_log, log_sink, monkeypatch):
    tenants = TenantRepository(session)

    def broken(building_ids):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    monkeypatch.setattr(tenants, "list_recipients_for_buildings", broken)
    resolver = AudienceResolver(tenants, BuildingRepository(session), operation_log)

    result = resolver.resolve_tenants_for_buildings(["b-1"])

    assert result.success is False
    assert "connection reset" in result.error
    assert log_sink.actions(LOG_STATUS_FAIL) == ["resolveTenantsForBuildings"]
