from __future__ import annotations

import json

import pytest

from app.core.auth import (
    INVALID_CREDENTIALS_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    SessionGate,
    session_gate,
    validate_credentials,
)
from app.core.dependencies import LOGIN_VIEW_PATH, MAIN_VIEW_PATH
from app.core.errors import AuthError, ValidationError
from app.core.storage import MemoryStore

SESSION_KEY = "employee_management_session"
T0 = 1_700_000_000.0


class _Clock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _gate(clock: _Clock | None = None) -> SessionGate:
    return SessionGate(MemoryStore(), session_key=SESSION_KEY, clock=clock or _Clock(T0))


def test_validate_credentials():
    assert validate_credentials("saied", "saied") is True
    assert validate_credentials("saied", "wrong") is False
    assert validate_credentials("admin", "saied") is False
    assert validate_credentials("Saied", "saied") is False


def test_create_session_stores_record():
    gate = _gate()
    record = gate.create_session("saied")

    stored = json.loads(gate.store.get_item(SESSION_KEY))
    assert stored["username"] == "saied"
    assert stored["timestamp"] == int(T0 * 1000)
    assert stored["loginTime"] == record.login_time
    assert stored["loginTime"].endswith("Z")


def test_create_session_overwrites_previous():
    gate = _gate()
    gate.create_session("first")
    gate.create_session("second")

    assert gate.current_session().username == "second"


def test_session_valid_just_before_expiry():
    clock = _Clock(T0)
    gate = _gate(clock)
    gate.create_session("saied")

    clock.now = T0 + 23 * 3600 + 59 * 60 + 59
    assert gate.is_session_valid() is True


def test_session_invalid_just_after_expiry():
    clock = _Clock(T0)
    gate = _gate(clock)
    gate.create_session("saied")

    clock.now = T0 + 24 * 3600 + 1
    assert gate.is_session_valid() is False
    assert gate.store.get_item(SESSION_KEY) is None


def test_missing_session_is_invalid():
    assert _gate().is_session_valid() is False


@pytest.mark.parametrize(
    "raw",
    ["not json", "null", "[]", '{"username": "saied"}', '{"username": "saied", "timestamp": 0, "loginTime": ""}'],
)
def test_corrupt_session_is_cleared(raw):
    gate = _gate()
    gate.store.set_item(SESSION_KEY, raw)

    assert gate.is_session_valid() is False
    assert gate.store.get_item(SESSION_KEY) is None


def test_logout_clears_session():
    gate = _gate()
    gate.create_session("saied")
    gate.logout()

    assert gate.is_session_valid() is False


def test_login_trims_and_creates_session():
    gate = _gate()
    record = gate.login("  saied ", " saied  ")

    assert record.username == "saied"
    assert gate.is_session_valid() is True


def test_login_requires_both_fields():
    gate = _gate()

    with pytest.raises(ValidationError) as exc_info:
        gate.login("saied", "   ")
    assert exc_info.value.message == MISSING_FIELDS_MESSAGE


def test_login_rejects_wrong_credentials():
    gate = _gate()

    with pytest.raises(AuthError) as exc_info:
        gate.login("saied", "nope")
    assert exc_info.value.message == INVALID_CREDENTIALS_MESSAGE
    assert gate.is_session_valid() is False


# HTTP surface


def test_login_endpoint_success(client):
    response = client.post("/api/v1/auth/login", json={"username": "saied", "password": "saied"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["username"] == "saied"
    assert data["redirect"] == MAIN_VIEW_PATH
    assert session_gate.is_session_valid() is True


def test_login_endpoint_wrong_credentials_clears_password(client):
    response = client.post("/api/v1/auth/login", json={"username": "saied", "password": "guess"})

    assert response.status_code == 401
    detail = response.json()["detail"]
    assert detail["message"] == INVALID_CREDENTIALS_MESSAGE
    assert detail["clear_password"] is True
    assert session_gate.is_session_valid() is False


def test_login_endpoint_missing_fields(client):
    response = client.post("/api/v1/auth/login", json={"username": "saied"})

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == MISSING_FIELDS_MESSAGE


def test_login_view_without_session(client):
    response = client.get("/api/v1/auth/login")

    assert response.status_code == 200
    assert response.json()["authenticated"] is False


def test_login_view_redirects_when_logged_in(authenticated_client):
    response = authenticated_client.get("/api/v1/auth/login", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == MAIN_VIEW_PATH


def test_protected_page_redirects_to_login(client):
    response = client.get("/api/v1/employees", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == LOGIN_VIEW_PATH


def test_session_endpoint_returns_user(authenticated_client):
    response = authenticated_client.get("/api/v1/auth/session")

    assert response.status_code == 200
    assert response.json()["username"] == "saied"


def test_logout_endpoint(authenticated_client):
    response = authenticated_client.post("/api/v1/auth/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == LOGIN_VIEW_PATH
    assert session_gate.is_session_valid() is False
