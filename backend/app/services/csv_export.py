"""CSV rendering of the employee table and the local "download" target."""

from __future__ import annotations

import csv
import io
import logging
import os
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from app.models.employee import EmployeeRecord

logger = logging.getLogger(__name__)

CSV_HEADERS: list[str] = ["ID", "Name", "Email", "Department", "Phone", "Hire Date", "Status"]
LOCAL_EXPORT_FILENAME = "employees-data.csv"


def _row(emp: EmployeeRecord) -> list[str]:
    return [emp.id, emp.name, emp.email, emp.department, emp.phone, emp.hire_date, emp.status]


def build_csv(employees: Sequence[EmployeeRecord]) -> str:
    """Header row as-is, then every field quoted with inner quotes doubled."""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADERS)
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for emp in employees:
        writer.writerow(_row(emp))
    return buffer.getvalue().rstrip("\n")


def build_api_body(employees: Sequence[EmployeeRecord]) -> str:
    return "\n".join(",".join(_row(emp)) for emp in employees)


def dated_export_filename(day: date) -> str:
    return f"employees_export_{day.isoformat()}.csv"


class CsvExporter:
    def __init__(self, export_dir: str | os.PathLike[str]) -> None:
        self.export_dir = Path(export_dir)

    def download(self, content: str, filename: str) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        path = self.export_dir / filename
        path.write_text(content, encoding="utf-8", newline="")
        logger.info("Wrote CSV export %s (%d bytes)", path, len(content.encode("utf-8")))
        return path
