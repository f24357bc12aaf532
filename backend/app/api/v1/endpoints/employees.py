from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.dependencies import get_employee_client, require_session
from app.models.auth import SessionRecord
from app.models.employee import EmployeeInput, EmployeeRecord, ErrorKind, OperationResult
from app.models.state import TableView
from app.services.employee_client import EmployeeClient

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/employees",
    tags=["employees"],
    dependencies=[Depends(require_session)],
)

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.HTTP_STATUS: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.EMPTY_DATA: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _raise_for_result(result: OperationResult) -> OperationResult:
    if not result.success:
        kind = result.error_kind or ErrorKind.UNKNOWN
        raise HTTPException(status_code=_STATUS_BY_KIND[kind], detail=result.error)
    return result


@router.get("", response_model=TableView)
async def table_view(
    session: SessionRecord = Depends(require_session),  # noqa: B008
    client: EmployeeClient = Depends(get_employee_client),  # noqa: B008
):
    state = client.state
    return TableView(
        employees=state.employees,
        count=len(state.employees),
        is_loading=state.is_loading,
        loading_message=state.loading_message,
        status_message=state.status_message,
        status_type=state.status_type,
        current_user=session.username,
    )


@router.post("/load", response_model=OperationResult)
@router.post("/refresh", response_model=OperationResult)
async def load_employees(client: EmployeeClient = Depends(get_employee_client)):  # noqa: B008
    return _raise_for_result(await client.list_employees())


@router.post("", response_model=EmployeeRecord, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeInput,
    client: EmployeeClient = Depends(get_employee_client),  # noqa: B008
):
    result = _raise_for_result(await client.create_employee(body))
    if result.stale:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Employee list was reloaded before the create completed",
        )
    return result.data


@router.get("/stats")
async def api_stats(client: EmployeeClient = Depends(get_employee_client)):  # noqa: B008
    return client.stats()


@router.post("/export", response_model=OperationResult)
async def export_via_api(client: EmployeeClient = Depends(get_employee_client)):  # noqa: B008
    return _raise_for_result(await client.export_via_api())


@router.get("/export/csv")
async def export_csv(client: EmployeeClient = Depends(get_employee_client)):  # noqa: B008
    result = _raise_for_result(client.export_local())
    return Response(
        content=result.data["content"],
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{result.data["file"]}"'},
    )


@router.get("/{employee_id}", response_model=EmployeeRecord)
async def get_employee(
    employee_id: str,
    client: EmployeeClient = Depends(get_employee_client),  # noqa: B008
):
    employee = client.find_employee(employee_id)
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee with id '{employee_id}' not found",
        )
    return employee


@router.put("/{employee_id}", response_model=OperationResult)
async def update_employee(
    employee_id: str,
    body: EmployeeInput,
    client: EmployeeClient = Depends(get_employee_client),  # noqa: B008
):
    return _raise_for_result(await client.update_employee(employee_id, body))


@router.delete("/{employee_id}", response_model=OperationResult)
async def delete_employee(
    employee_id: str,
    client: EmployeeClient = Depends(get_employee_client),  # noqa: B008
):
    return _raise_for_result(await client.delete_employee(employee_id))
