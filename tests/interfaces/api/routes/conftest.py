"""Fixtures for exercising the HTTP routes."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.application.use_cases import OperationLog
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_operation_log


@pytest.fixture()
def client(session_factory, log_sink):
    """Return a test client whose sessions use the per-test database."""

    from main import create_app

    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_operation_log] = lambda: OperationLog(log_sink)

    with TestClient(app) as test_client:
        yield test_client
