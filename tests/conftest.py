"""Shared fixtures: an in-memory database and in-process collaborators."""

from __future__ import annotations

import os
import threading
from datetime import datetime

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.application.use_cases.operation_logs import OperationLog
from app.domain.entities import DeliveryResult, Recipient
from app.infrastructure.database import initialize_database
from app.infrastructure.models import (
    ApartmentModel,
    BuildingModel,
    ClientModel,
    PollModel,
    TenantModel,
)


class RecordingLogSink:
    """Keep appended operation log entries in memory."""

    def __init__(self) -> None:
        self.entries = []

    def append(self, entry) -> None:
        self.entries.append(entry)

    def actions(self, status: str | None = None) -> list[str]:
        return [
            entry.action
            for entry in self.entries
            if status is None or entry.status == status
        ]


class FailingLogSink:
    def append(self, entry) -> None:
        raise RuntimeError("log store unavailable")


class FakeContactResolver:
    def __init__(self, contacts: dict[str, Recipient] | None = None) -> None:
        self.contacts = dict(contacts or {})
        self.calls: list[list[str]] = []

    def lookup_contacts_by_user_ids(self, user_ids):
        self.calls.append(list(user_ids))
        return {user_id: self.contacts[user_id] for user_id in user_ids if user_id in self.contacts}


class FakeMessageTransport:
    """Record SMS/WhatsApp sends; raise for numbers listed in ``fail_for``."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail_for: set[str] = set()
        self._lock = threading.Lock()

    def send(self, to, title, body, notification_type) -> DeliveryResult:
        if to in self.fail_for:
            raise RuntimeError(f"provider rejected {to}")
        with self._lock:
            self.sent.append(
                {"to": to, "title": title, "body": body, "type": notification_type}
            )
            return DeliveryResult(ok=True, id=f"SM{len(self.sent)}", status="queued")


class FakeEmailTransport:
    """Record emails; report a provider failure for addresses in ``fail_for``."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail_for: set[str] = set()
        self._lock = threading.Lock()

    def send(self, to, subject, html) -> DeliveryResult:
        if any(address in self.fail_for for address in to):
            return DeliveryResult(ok=False, error="mailbox unavailable")
        with self._lock:
            self.sent.append({"to": list(to), "subject": subject, "html": html})
            return DeliveryResult(ok=True, id=f"email-{len(self.sent)}", status="202")


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def log_sink() -> RecordingLogSink:
    return RecordingLogSink()


@pytest.fixture()
def operation_log(log_sink) -> OperationLog:
    return OperationLog(log_sink)


@pytest.fixture()
def failing_operation_log() -> OperationLog:
    return OperationLog(FailingLogSink())


@pytest.fixture()
def message_transport() -> FakeMessageTransport:
    return FakeMessageTransport()


@pytest.fixture()
def email_transport() -> FakeEmailTransport:
    return FakeEmailTransport()


@pytest.fixture()
def contact_resolver_factory():
    return FakeContactResolver


@pytest.fixture()
def building_with_tenants(session):
    """Create a managed building with three tenants and a poll.

    * ``ana`` accepts SMS and email.
    * ``ben`` accepts email only and has no phone number.
    * ``cleo`` has SMS disabled.
    """

    client = ClientModel(name="Acme Estates", email="manager@acme.test")
    building = BuildingModel(
        client=client, street_number="12", street_address="Main Street", city="Novi Sad"
    )
    first = ApartmentModel(building=building, apartment_number="1")
    second = ApartmentModel(building=building, apartment_number="2")
    session.add_all([client, building, first, second])
    session.flush()

    tenants = [
        TenantModel(
            user_id="ana",
            apartment=first,
            email="ana@example.com",
            phone_number="+381 64 111 2222",
            email_opt_in=True,
            sms_opt_in=True,
            created_at=datetime(2024, 1, 1, 9, 0),
        ),
        TenantModel(
            user_id="ben",
            apartment=second,
            email="ben@example.com",
            email_opt_in=True,
            sms_opt_in=True,
            created_at=datetime(2024, 1, 2, 9, 0),
        ),
        TenantModel(
            user_id="cleo",
            apartment=second,
            email="cleo@example.com",
            phone_number="+381641113333",
            email_opt_in=False,
            sms_opt_in=False,
            created_at=datetime(2024, 1, 3, 9, 0),
        ),
    ]
    session.add_all(tenants)

    poll = PollModel(
        building_id=building.id,
        title="Roof repair",
        description="<p>Choose a <b>contractor</b></p>",
        status="draft",
    )
    session.add(poll)
    session.commit()
    return {"building_id": building.id, "client_id": client.id, "poll_id": poll.id}
