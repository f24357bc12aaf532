from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from app.core.auth import session_gate
from app.core.config import settings
from app.core.storage import MemoryStore
from app.main import app
from app.models.employee import EmployeeRecord
from app.models.state import AppState
from app.services.employee_client import employee_client
from app.services.request_sequencer import RequestSequencer

TEST_USERNAME = "saied"
TEST_PASSWORD = "saied"


@pytest.fixture(autouse=True)
def _isolated_state(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setattr(session_gate, "store", MemoryStore())
    employee_client.state = AppState()
    employee_client.ids.reset()
    employee_client.sequencer = RequestSequencer()
    yield
    employee_client.state = AppState()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def authenticated_client():
    session_gate.create_session(TEST_USERNAME)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_record(employee_id: str, name: str | None = None, **overrides) -> EmployeeRecord:
    fields = {
        "id": employee_id,
        "name": name or f"Employee {employee_id}",
        "email": f"employee{employee_id}@example.com",
        "department": "Engineering",
        "phone": "(555) 123-4567",
        "hire_date": "2020-05-17",
        "status": "Active",
    }
    fields.update(overrides)
    return EmployeeRecord(**fields)


@pytest.fixture
def sample_records() -> list[EmployeeRecord]:
    return [make_record("001"), make_record("002"), make_record("003")]


@pytest.fixture
def anyio_backend():
    return "asyncio"
