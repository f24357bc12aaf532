"""Employee models shared by the client, the CSV export and the API layer."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEPARTMENTS: list[str] = [
    "Engineering",
    "Marketing",
    "Sales",
    "Human Resources",
    "Finance",
    "Operations",
    "IT Support",
    "Legal",
    "Research & Development",
    "Customer Service",
    "Quality Assurance",
    "Product Management",
    "Business Development",
    "Design",
    "Security",
]

STATUSES: list[str] = ["Active", "Inactive", "Pending"]

EmployeeStatus = Literal["Active", "Inactive", "Pending"]


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    EMPTY_DATA = "empty_data"
    UNKNOWN = "unknown"


class EmployeeInput(BaseModel):
    """Form fields of an employee; the body of create and update."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    department: str
    phone: str = ""
    hire_date: str = Field(default="", alias="hireDate")
    status: EmployeeStatus = "Active"

    @field_validator("department")
    @classmethod
    def _known_department(cls, value: str) -> str:
        if value not in DEPARTMENTS:
            raise ValueError(f"Unknown department: {value}")
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class EmployeeRecord(EmployeeInput):
    id: str


class OperationResult(BaseModel):
    success: bool
    data: Any = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    count: int | None = None
    stale: bool = False
