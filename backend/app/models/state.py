"""Application state rendered by the table view."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.models.employee import EmployeeRecord

StatusType = Literal["info", "success", "error"]


class AppState(BaseModel):
    employees: list[EmployeeRecord] = Field(default_factory=list)
    is_loading: bool = False
    loading_message: str = ""
    status_message: str = "Application initialized. Ready for API operations."
    status_type: StatusType = "info"
    editing_id: str | None = None


class TableView(BaseModel):
    """Snapshot returned by GET /employees."""

    employees: list[EmployeeRecord]
    count: int
    is_loading: bool
    loading_message: str
    status_message: str
    status_type: StatusType
    current_user: str | None = None
