"""REST client for the remote employee resource, mirrored into local state."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import aiohttp

from app.core.config import RequestConfig, Settings
from app.core.errors import EmployeeAppError, EmptyDataError, RemoteStatusError, TransientNetworkError
from app.models.employee import (
    DEPARTMENTS,
    STATUSES,
    EmployeeInput,
    EmployeeRecord,
    ErrorKind,
    OperationResult,
)
from app.models.state import AppState, StatusType
from app.services.csv_export import (
    LOCAL_EXPORT_FILENAME,
    CsvExporter,
    build_api_body,
    build_csv,
    dated_export_filename,
)
from app.services.id_generator import IdGenerator, pad_id
from app.services.request_sequencer import RequestSequencer, Ticket, employee_key

logger = logging.getLogger(__name__)

_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}

LIST_TIMEOUT_MESSAGE = "Request timed out after retries. Please check your connection and try again."
TIMEOUT_MESSAGE = "Request timed out. Please check your connection and try again."
EXPORT_TIMEOUT_MESSAGE = "Export timed out. Please try again."
NETWORK_MESSAGE = "Unable to connect to server. Please try again later."
NO_DATA_MESSAGE = "No employee data to export. Please load employees first."

_HIRE_DATE_START = date(2016, 1, 1)
_HIRE_DATE_END = date(2024, 12, 31)

StateListener = Callable[[AppState], None]


def department_for_index(index: int) -> str:
    return DEPARTMENTS[index % len(DEPARTMENTS)]


def status_for_index(index: int) -> str:
    return STATUSES[index % len(STATUSES)]


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EmployeeClient:
    def __init__(self, rng: random.Random | None = None) -> None:
        self.config: RequestConfig | None = None
        self.exporter: CsvExporter | None = None
        self.initialized = False
        self.list_limit = 15
        self.state = AppState()
        self.rng = rng or random.Random()
        self.ids = IdGenerator()
        self.sequencer = RequestSequencer()
        self._in_flight = 0
        self._listeners: list[StateListener] = []

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.API_BASE_URL:
            logger.warning("API base URL missing: EmployeeClient not initialized")
            return

        self.config = RequestConfig.from_settings(settings)
        self.exporter = CsvExporter(settings.EXPORT_DIR)
        self.list_limit = settings.EMPLOYEE_LIST_LIMIT
        self.initialized = True
        logger.info("EmployeeClient initialized (endpoint=%s)", self.config.url("employees"))

    async def close(self) -> None:
        self.config = None
        self.exporter = None
        self.initialized = False

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # State transitions

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    def _set_loading(self, loading: bool, message: str = "Loading...") -> None:
        if loading:
            self._in_flight += 1
            self.state.is_loading = True
            self.state.loading_message = message
        else:
            self._in_flight = max(0, self._in_flight - 1)
            if self._in_flight == 0:
                self.state.is_loading = False
                self.state.loading_message = ""
        self._notify()

    def _set_loading_message(self, message: str) -> None:
        self.state.loading_message = message
        self._notify()

    def _update_status(self, message: str, status_type: StatusType = "info") -> None:
        self.state.status_message = message
        self.state.status_type = status_type
        logger.info("[%s] %s", status_type.upper(), message)
        self._notify()

    def _require_config(self) -> RequestConfig:
        if not self.initialized or self.config is None:
            raise RuntimeError("EmployeeClient not initialized")
        return self.config

    def _require_employees(self) -> list[EmployeeRecord]:
        if not self.state.employees:
            raise EmptyDataError(NO_DATA_MESSAGE)
        return self.state.employees

    def _fail(self, action: str, err: Exception) -> OperationResult:
        if isinstance(err, EmployeeAppError):
            message, kind = err.message, err.kind
        else:
            message, kind = str(err), ErrorKind.UNKNOWN
        self._update_status(f"Failed to {action}: {message}", "error")
        return OperationResult(success=False, error=message, error_kind=kind)

    def _stale(self, action: str, ticket: Ticket) -> OperationResult:
        logger.info("Discarding stale %s response (token=%d)", action, ticket.token)
        return OperationResult(success=True, stale=True)

    # HTTP

    async def _request(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        timeout_message: str = TIMEOUT_MESSAGE,
    ) -> Any:
        config = self._require_config()
        timeout = aiohttp.ClientTimeout(total=config.timeout_ms / 1000)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, headers=_HEADERS, json=payload) as response:
                    if not 200 <= response.status < 300:
                        raise RemoteStatusError(response.status, response.reason)
                    try:
                        return await response.json(content_type=None)
                    except ValueError:
                        # 2xx is trusted as success whatever the body holds
                        return None
        except asyncio.TimeoutError as err:
            raise TransientNetworkError(timeout_message, kind=ErrorKind.TIMEOUT) from err
        except aiohttp.ClientConnectionError as err:
            raise TransientNetworkError(NETWORK_MESSAGE, kind=ErrorKind.NETWORK) from err

    async def _fetch_with_retry(self, config: RequestConfig) -> Any:
        url = config.url("employees")
        attempt = 0
        while True:
            if attempt:
                self._set_loading_message(f"Retrying... ({attempt}/{config.max_retries})")
            self._update_status("Loading employees from API...", "info")
            try:
                return await self._request("GET", url, timeout_message=LIST_TIMEOUT_MESSAGE)
            except TransientNetworkError as err:
                if attempt >= config.max_retries:
                    raise
                attempt += 1
                logger.warning(
                    "Retrying... Attempt %d/%d after %s",
                    attempt,
                    config.max_retries,
                    err.kind.value,
                )
                await asyncio.sleep(config.retry_backoff_ms * attempt / 1000)

    # Remote shape -> local record

    def _random_phone(self) -> str:
        return f"(555) {self.rng.randint(100, 999)}-{self.rng.randint(1000, 9999)}"

    def _random_hire_date(self) -> str:
        span = (_HIRE_DATE_END - _HIRE_DATE_START).days
        return (_HIRE_DATE_START + timedelta(days=self.rng.randint(0, span))).isoformat()

    def _transform(self, user: dict[str, Any], index: int) -> EmployeeRecord:
        return EmployeeRecord(
            id=pad_id(user.get("id")),
            name=str(user.get("name") or ""),
            email=str(user.get("email") or ""),
            department=department_for_index(index),
            phone=str(user.get("phone") or self._random_phone()),
            hire_date=self._random_hire_date(),
            status=status_for_index(index),
        )

    # Operations

    async def list_employees(self) -> OperationResult:
        config = self._require_config()
        ticket = self.sequencer.begin_reload()
        self._set_loading(True, "Fetching employees...")
        try:
            data = await self._fetch_with_retry(config)
            if not isinstance(data, list):
                raise EmployeeAppError("Unexpected response from server")

            employees = [self._transform(user, i) for i, user in enumerate(data[: self.list_limit])]
            if not self.sequencer.is_current(ticket):
                return self._stale("list", ticket)

            self.state.employees = employees
            self.ids.reset()
            self._update_status(f"Successfully loaded {len(employees)} employees", "success")
            return OperationResult(success=True, data=employees, count=len(employees))
        except EmployeeAppError as err:
            return self._fail("load employees", err)
        except Exception as err:
            logger.exception("Unexpected error loading employees")
            return self._fail("load employees", err)
        finally:
            self.sequencer.finish_reload(ticket)
            self._set_loading(False)

    async def create_employee(self, data: EmployeeInput) -> OperationResult:
        config = self._require_config()
        ticket = self.sequencer.issue()
        self._set_loading(True, "Creating employee...")
        self._update_status("Creating new employee via API...", "info")
        try:
            await self._request("POST", config.url("employees"), payload=data.to_payload())
            await self.sequencer.wait_for_reload(ticket)
            if not self.sequencer.is_current(ticket):
                return self._stale("create", ticket)

            record = EmployeeRecord(id=self.ids.next_id(self.state.employees), **data.model_dump())
            self.state.employees.insert(0, record)
            self._update_status("Employee created successfully", "success")
            return OperationResult(success=True, data=record)
        except EmployeeAppError as err:
            return self._fail("create employee", err)
        except Exception as err:
            logger.exception("Unexpected error creating employee")
            return self._fail("create employee", err)
        finally:
            self._set_loading(False)

    async def update_employee(self, employee_id: str, data: EmployeeInput) -> OperationResult:
        config = self._require_config()
        ticket = self.sequencer.issue(employee_key(employee_id))
        self._set_loading(True, "Updating employee...")
        self._update_status("Updating employee via API...", "info")
        try:
            result = await self._request("PUT", config.url("employees", employee_id), payload=data.to_payload())
            await self.sequencer.wait_for_reload(ticket)
            if not self.sequencer.is_current(ticket):
                return self._stale("update", ticket)

            for index, emp in enumerate(self.state.employees):
                if emp.id == employee_id:
                    self.state.employees[index] = EmployeeRecord(id=employee_id, **data.model_dump())
                    break
            else:
                logger.debug("Employee %s not in local collection; nothing to update", employee_id)

            self._update_status("Employee updated successfully", "success")
            return OperationResult(success=True, data=result)
        except EmployeeAppError as err:
            return self._fail("update employee", err)
        except Exception as err:
            logger.exception("Unexpected error updating employee %s", employee_id)
            return self._fail("update employee", err)
        finally:
            self._set_loading(False)

    async def delete_employee(self, employee_id: str) -> OperationResult:
        config = self._require_config()
        ticket = self.sequencer.issue(employee_key(employee_id))
        self._set_loading(True, "Deleting employee...")
        self._update_status("Deleting employee via API...", "info")
        try:
            await self._request("DELETE", config.url("employees", employee_id))
            await self.sequencer.wait_for_reload(ticket)
            if not self.sequencer.is_current(ticket):
                return self._stale("delete", ticket)

            self.state.employees = [emp for emp in self.state.employees if emp.id != employee_id]
            if self.state.editing_id == employee_id:
                self.state.editing_id = None
            self._update_status("Employee deleted successfully", "success")
            return OperationResult(success=True)
        except EmployeeAppError as err:
            return self._fail("delete employee", err)
        except Exception as err:
            logger.exception("Unexpected error deleting employee %s", employee_id)
            return self._fail("delete employee", err)
        finally:
            self._set_loading(False)

    async def export_via_api(self) -> OperationResult:
        config = self._require_config()
        try:
            employees = list(self._require_employees())
        except EmptyDataError as err:
            self._update_status(err.message, "error")
            return OperationResult(success=False, error=err.message, error_kind=err.kind)

        self._set_loading(True, "Exporting via API...")
        self._update_status("Exporting employee data via API...", "info")
        try:
            payload = {
                "title": "Employee Data Export",
                "body": build_api_body(employees),
                "userId": 1,
                "timestamp": _utc_now_iso(),
                "recordCount": len(employees),
            }
            result = await self._request(
                "POST",
                config.url("export"),
                payload=payload,
                timeout_message=EXPORT_TIMEOUT_MESSAGE,
            )
            filename = dated_export_filename(datetime.now(timezone.utc).date())
            try:
                path = self._download(build_csv(employees), filename)
            except OSError as err:
                logger.exception("Export accepted by API but %s could not be written", filename)
                message = f"Data exported via API, but the CSV file could not be saved: {err}"
                self._update_status(message, "error")
                return OperationResult(
                    success=True,
                    data={"response": result, "file": None},
                    error=message,
                    count=len(employees),
                )

            self._update_status(f"Data exported via API successfully ({len(employees)} records)", "success")
            return OperationResult(
                success=True,
                data={"response": result, "file": path.name},
                count=len(employees),
            )
        except EmployeeAppError as err:
            return self._fail("export via API", err)
        except Exception as err:
            logger.exception("Unexpected error exporting via API")
            return self._fail("export via API", err)
        finally:
            self._set_loading(False)

    def export_local(self) -> OperationResult:
        try:
            employees = self._require_employees()
        except EmptyDataError as err:
            self._update_status(err.message, "error")
            return OperationResult(success=False, error=err.message, error_kind=err.kind)

        self._update_status("Preparing CSV export...", "info")
        content = build_csv(employees)
        try:
            path = self._download(content, LOCAL_EXPORT_FILENAME)
        except OSError as err:
            logger.exception("CSV export failed")
            return self._fail("export CSV", err)

        self._update_status("CSV file downloaded successfully", "success")
        return OperationResult(
            success=True,
            data={"file": path.name, "content": content},
            count=len(employees),
        )

    def _download(self, content: str, filename: str) -> Path:
        if self.exporter is None:
            raise RuntimeError("EmployeeClient not initialized")
        return self.exporter.download(content, filename)

    # Table view helpers

    def find_employee(self, employee_id: str) -> EmployeeRecord | None:
        for emp in self.state.employees:
            if emp.id == employee_id:
                self.state.editing_id = employee_id
                return emp
        return None

    def stats(self) -> dict[str, Any]:
        config = self._require_config()
        return {
            "employeeCount": len(self.state.employees),
            "apiBaseUrl": config.base_url,
            "endpoints": dict(config.endpoints),
            "currentStatus": self.state.status_message,
            "isLoading": self.state.is_loading,
            "lastUpdate": _utc_now_iso(),
        }

    async def check_connection(self) -> bool:
        if not self.initialized or self.config is None:
            return False
        try:
            timeout = aiohttp.ClientTimeout(total=10)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.config.url("employees"), headers=_HEADERS) as response:
                    return response.status == 200
        except Exception:
            logger.exception("EmployeeClient connection check failed")
            return False


employee_client = EmployeeClient()
