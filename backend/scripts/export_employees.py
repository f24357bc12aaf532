#!/usr/bin/env python3
"""Headless employee export.

Logs in through the session gate, loads employees from the configured API and
writes the CSV export. Run from the backend/ directory:

    python3 scripts/export_employees.py --username saied --password saied [--via-api] [--verbose]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from app.core.auth import SessionGate  # noqa: E402
from app.core.config import Settings  # noqa: E402
from app.core.errors import AuthError, ValidationError  # noqa: E402
from app.services.employee_client import EmployeeClient  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Load employees from the remote API and export them as CSV",
    )
    parser.add_argument("--username", default="", help="Login username")
    parser.add_argument("--password", default="", help="Login password")
    parser.add_argument(
        "--via-api",
        action="store_true",
        help="POST the export to the export endpoint before writing the CSV",
    )
    parser.add_argument(
        "--export-dir",
        default=None,
        help="Directory for the CSV file (default: EXPORT_DIR setting)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


async def run_export(args: argparse.Namespace, settings: Settings | None = None) -> int:
    settings = settings or Settings()
    level = logging.DEBUG if args.verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    if args.export_dir:
        settings.EXPORT_DIR = args.export_dir

    gate = SessionGate.from_settings(settings)
    if not gate.is_session_valid():
        try:
            gate.login(args.username, args.password)
        except (ValidationError, AuthError) as err:
            logger.error("Login failed: %s", err.message)
            return 1

    client = EmployeeClient()
    await client.initialize(settings)
    if not client.initialized:
        logger.error("Employee API is not configured")
        return 1

    try:
        loaded = await client.list_employees()
        if not loaded.success:
            logger.error("Could not load employees: %s", loaded.error)
            return 1
        logger.info("Loaded %d employees", loaded.count)

        result = await client.export_via_api() if args.via_api else client.export_local()
        if not result.success:
            logger.error("Export failed: %s", result.error)
            return 1
        if result.data["file"] is None:
            logger.error("Export sent but no file written: %s", result.error)
            return 1

        logger.info("Exported %d records to %s", result.count, result.data["file"])
        return 0
    finally:
        await client.close()


def main() -> None:
    args = parse_args()
    sys.exit(asyncio.run(run_export(args)))


if __name__ == "__main__":
    main()
