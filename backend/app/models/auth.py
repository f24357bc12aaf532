"""Session and login models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SessionRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    timestamp: int
    login_time: str = Field(alias="loginTime")


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    success: bool
    username: str | None = None
    redirect: str | None = None
    message: str | None = None
