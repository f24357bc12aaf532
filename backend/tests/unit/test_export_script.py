"""Tests for the headless export script."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.config import Settings
from app.models.employee import OperationResult
from scripts.export_employees import parse_args, run_export


def _make_settings(tmp_path) -> Settings:
    return Settings(
        SESSION_STORE_PATH=str(tmp_path / "session.json"),
        EXPORT_DIR=str(tmp_path / "exports"),
    )


def _mock_client(export_result: OperationResult | None = None) -> MagicMock:
    client = MagicMock()
    client.initialize = AsyncMock()
    client.close = AsyncMock()
    client.initialized = True
    client.list_employees = AsyncMock(return_value=OperationResult(success=True, count=3))
    client.export_local = MagicMock(
        return_value=export_result or OperationResult(success=True, count=3, data={"file": "employees-data.csv"})
    )
    client.export_via_api = AsyncMock(
        return_value=OperationResult(success=True, count=3, data={"file": "employees_export_2024-01-01.csv"})
    )
    return client


def test_parse_args_defaults():
    args = parse_args([])
    assert args.username == ""
    assert args.password == ""
    assert args.via_api is False
    assert args.export_dir is None
    assert args.verbose is False


def test_parse_args_flags():
    args = parse_args(["--username", "saied", "--password", "saied", "--via-api", "--verbose"])
    assert args.username == "saied"
    assert args.via_api is True
    assert args.verbose is True


@pytest.mark.anyio
async def test_run_export_rejects_bad_login(tmp_path):
    args = parse_args(["--username", "saied", "--password", "wrong"])
    client = _mock_client()

    with patch("scripts.export_employees.EmployeeClient", return_value=client):
        code = await run_export(args, _make_settings(tmp_path))

    assert code == 1
    client.list_employees.assert_not_called()


@pytest.mark.anyio
async def test_run_export_local(tmp_path):
    args = parse_args(["--username", "saied", "--password", "saied"])
    client = _mock_client()

    with patch("scripts.export_employees.EmployeeClient", return_value=client):
        code = await run_export(args, _make_settings(tmp_path))

    assert code == 0
    client.list_employees.assert_awaited_once()
    client.export_local.assert_called_once()
    client.export_via_api.assert_not_called()
    client.close.assert_awaited_once()
    assert (tmp_path / "session.json").exists()


@pytest.mark.anyio
async def test_run_export_via_api(tmp_path):
    args = parse_args(["--username", "saied", "--password", "saied", "--via-api"])
    client = _mock_client()

    with patch("scripts.export_employees.EmployeeClient", return_value=client):
        code = await run_export(args, _make_settings(tmp_path))

    assert code == 0
    client.export_via_api.assert_awaited_once()
    client.export_local.assert_not_called()


@pytest.mark.anyio
async def test_run_export_load_failure(tmp_path):
    args = parse_args(["--username", "saied", "--password", "saied"])
    client = _mock_client()
    client.list_employees = AsyncMock(return_value=OperationResult(success=False, error="HTTP 500"))

    with patch("scripts.export_employees.EmployeeClient", return_value=client):
        code = await run_export(args, _make_settings(tmp_path))

    assert code == 1
    client.export_local.assert_not_called()
    client.close.assert_awaited_once()


@pytest.mark.anyio
async def test_run_export_via_api_without_written_file(tmp_path):
    args = parse_args(["--username", "saied", "--password", "saied", "--via-api"])
    client = _mock_client()
    client.export_via_api = AsyncMock(
        return_value=OperationResult(success=True, count=3, data={"response": {}, "file": None}, error="disk full")
    )

    with patch("scripts.export_employees.EmployeeClient", return_value=client):
        code = await run_export(args, _make_settings(tmp_path))

    assert code == 1
    client.close.assert_awaited_once()
