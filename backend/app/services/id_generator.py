from __future__ import annotations

from collections.abc import Sequence

from app.models.employee import EmployeeRecord


def pad_id(value: object, width: int = 3) -> str:
    return str(value).zfill(width)


class IdGenerator:
    """Issues local employee ids that are not reused after deletions.

    The counter only moves forward and is seeded from the larger of the
    collection length and the highest numeric id present. A reload replaces
    the collection, so the owner resets the counter at that point.
    """

    def __init__(self, width: int = 3) -> None:
        self.width = width
        self._last = 0

    def next_id(self, existing: Sequence[EmployeeRecord]) -> str:
        highest = max((int(emp.id) for emp in existing if emp.id.isdecimal()), default=0)
        self._last = max(self._last, highest, len(existing)) + 1
        return pad_id(self._last, self.width)

    def reset(self) -> None:
        self._last = 0
