"""Shared fixtures: a manual scheduler that fires reveal ticks on demand."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest


class FakeHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: tuple) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Stands in for an asyncio loop's call_later with a virtual clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def run_next(self) -> bool:
        """Fire the earliest pending callback. Returns False if none."""
        pending = self.pending
        if not pending:
            return False
        handle = min(pending, key=lambda h: h.when)
        self.now = handle.when
        handle.fired = True
        handle.callback(*handle.args)
        return True

    def run(self, count: int) -> None:
        for _ in range(count):
            assert self.run_next(), "no pending tick"

    def run_all(self, limit: int = 10_000) -> int:
        """Fire callbacks until none are pending. Returns how many fired."""
        fired = 0
        while self.run_next():
            fired += 1
            assert fired < limit, "scheduler did not drain"
        return fired


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()
