from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from app.core.auth import SessionGate
from app.core.dependencies import LOGIN_VIEW_PATH, MAIN_VIEW_PATH, get_session_gate, require_session
from app.core.errors import AuthError, ValidationError
from app.models.auth import LoginRequest, LoginResponse, SessionRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/login")
async def login_view(gate: SessionGate = Depends(get_session_gate)):  # noqa: B008
    if gate.is_session_valid():
        return RedirectResponse(MAIN_VIEW_PATH, status_code=status.HTTP_303_SEE_OTHER)
    return {"authenticated": False, "message": "Please log in to continue."}


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    gate: SessionGate = Depends(get_session_gate),  # noqa: B008
):
    try:
        record = gate.login(body.username, body.password)
    except ValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": err.message, "clear_password": False},
        ) from err
    except AuthError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": err.message, "clear_password": True},
        ) from err

    return LoginResponse(
        success=True,
        username=record.username,
        redirect=MAIN_VIEW_PATH,
        message="Login Successful!",
    )


@router.post("/logout")
async def logout(gate: SessionGate = Depends(get_session_gate)):  # noqa: B008
    gate.logout()
    return RedirectResponse(LOGIN_VIEW_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/session", response_model=SessionRecord)
async def current_session(session: SessionRecord = Depends(require_session)):  # noqa: B008
    return session
