"""Session gate: fixed credential check and timestamped sessions.

This is a demonstration shell, not a security boundary: the credentials are
only base64-encoded and the comparison runs wherever this module runs.
"""

from __future__ import annotations

import base64
import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings, settings
from app.core.errors import AuthError, ValidationError
from app.core.storage import JsonFileStore, KeyValueStore
from app.models.auth import SessionRecord

logger = logging.getLogger(__name__)

_ENCODED_USERNAME = "c2FpZWQ="
_ENCODED_PASSWORD = "c2FpZWQ="

MISSING_FIELDS_MESSAGE = "Please enter both username and password."
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password. Please try again."


def _decode(value: str) -> str:
    return base64.b64decode(value).decode("utf-8")


def validate_credentials(username: str, password: str) -> bool:
    return username == _decode(_ENCODED_USERNAME) and password == _decode(_ENCODED_PASSWORD)


class SessionGate:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        session_key: str = "employee_management_session",
        timeout_hours: int = 24,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.session_key = session_key
        self.timeout_ms = timeout_hours * 60 * 60 * 1000
        self.clock = clock

    @classmethod
    def from_settings(cls, config: Settings) -> SessionGate:
        return cls(
            JsonFileStore(config.SESSION_STORE_PATH),
            session_key=config.SESSION_KEY,
            timeout_hours=config.SESSION_TIMEOUT_HOURS,
        )

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def login(self, username: str, password: str) -> SessionRecord:
        username = username.strip()
        password = password.strip()
        if not username or not password:
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        if not validate_credentials(username, password):
            logger.info("Rejected login attempt for %r", username)
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        return self.create_session(username)

    def create_session(self, username: str) -> SessionRecord:
        now = self.clock()
        login_time = datetime.fromtimestamp(now, tz=timezone.utc)
        record = SessionRecord(
            username=username,
            timestamp=int(now * 1000),
            login_time=login_time.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )
        self.store.set_item(self.session_key, record.model_dump_json(by_alias=True))
        logger.info("Session created for %s", username)
        return record

    def current_session(self) -> SessionRecord | None:
        """Return the stored session if it is still valid, clearing it otherwise."""
        raw = self.store.get_item(self.session_key)
        if raw is None:
            return None

        try:
            record = SessionRecord.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Discarding unreadable session record")
            self.store.remove_item(self.session_key)
            return None

        if not record.timestamp or self._now_ms() - record.timestamp > self.timeout_ms:
            logger.info("Session for %s expired", record.username)
            self.store.remove_item(self.session_key)
            return None

        return record

    def is_session_valid(self) -> bool:
        return self.current_session() is not None

    def logout(self) -> None:
        self.store.remove_item(self.session_key)


session_gate = SessionGate.from_settings(settings)
