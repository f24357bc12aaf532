"""Error taxonomy shared by the session gate and the employee client."""

from __future__ import annotations

from app.models.employee import ErrorKind


class EmployeeAppError(Exception):
    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EmployeeAppError):
    """Required login fields are missing."""


class AuthError(EmployeeAppError):
    """Credentials did not match. The message never says which field was wrong."""


class SessionRequiredError(EmployeeAppError):
    """No valid session; the caller is sent to the login view."""


class TransientNetworkError(EmployeeAppError):
    """Timeout or connectivity loss. Only list() retries these."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.NETWORK) -> None:
        super().__init__(message)
        self.kind = kind


class RemoteStatusError(EmployeeAppError):
    kind = ErrorKind.HTTP_STATUS

    def __init__(self, status: int, reason: str | None = None) -> None:
        super().__init__(f"HTTP {status}: {reason}" if reason else f"HTTP {status}")
        self.status = status
        self.reason = reason


class EmptyDataError(EmployeeAppError):
    kind = ErrorKind.EMPTY_DATA
