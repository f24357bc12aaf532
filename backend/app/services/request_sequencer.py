"""Monotonic request tokens deciding which responses may mutate state."""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass

COLLECTION_KEY = "collection"


def employee_key(employee_id: str) -> str:
    return f"employee:{employee_id}"


@dataclass(frozen=True)
class Ticket:
    key: str | None
    token: int
    epoch: int


class RequestSequencer:
    """Only the latest-issued request per key is allowed to apply its response.

    A reload of the whole collection starts a new epoch; responses to requests
    issued in an earlier epoch are discarded because the collection they
    targeted has been replaced. A mutation issued while a reload is in flight
    holds its response until that reload settles, so changes land in issue
    order whichever response arrives first.
    """

    def __init__(self) -> None:
        self._tokens = itertools.count(1)
        self._latest: dict[str, int] = {}
        self._pending_reloads: dict[int, asyncio.Event] = {}
        self.epoch = 0

    def issue(self, key: str | None = None) -> Ticket:
        token = next(self._tokens)
        if key is not None:
            self._latest[key] = token
        return Ticket(key=key, token=token, epoch=self.epoch)

    def begin_reload(self) -> Ticket:
        self.epoch += 1
        self._pending_reloads[self.epoch] = asyncio.Event()
        return self.issue(COLLECTION_KEY)

    def finish_reload(self, ticket: Ticket) -> None:
        """Release mutations waiting on the reload that opened ``ticket.epoch``."""
        pending = self._pending_reloads.pop(ticket.epoch, None)
        if pending is not None:
            pending.set()

    async def wait_for_reload(self, ticket: Ticket) -> None:
        pending = self._pending_reloads.get(ticket.epoch)
        if pending is not None:
            await pending.wait()

    def is_current(self, ticket: Ticket) -> bool:
        if ticket.epoch != self.epoch:
            return False
        if ticket.key is not None and self._latest.get(ticket.key) != ticket.token:
            return False
        return True
