from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status

from app.core.auth import SessionGate, session_gate
from app.core.errors import SessionRequiredError
from app.models.auth import SessionRecord
from app.services.employee_client import EmployeeClient, employee_client

logger = logging.getLogger(__name__)

LOGIN_VIEW_PATH = "/api/v1/auth/login"
MAIN_VIEW_PATH = "/api/v1/employees"


def get_session_gate() -> SessionGate:
    return session_gate


def get_employee_client() -> EmployeeClient:
    if not employee_client.initialized:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Employee API not configured",
        )
    return employee_client


async def require_session(gate: SessionGate = Depends(get_session_gate)) -> SessionRecord:  # noqa: B008
    record = gate.current_session()
    if record is None:
        logger.info("No valid session, redirecting to login view")
        raise SessionRequiredError("Please log in to continue.")
    return record
