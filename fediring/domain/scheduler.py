"""Interval callbacks with their last-run time kept in bot state.

Pure domain logic, no framework dependencies.
"""

import sys
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from fediring.config import DATA_NAME
from fediring.ports.outbound import StatePort

Clock = Callable[[], datetime]


def _log(msg: str):
    print(msg, file=sys.stderr)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IntervalScheduler:
    """Runs a callback when at least `interval` seconds passed since its last success."""

    def __init__(self, state: StatePort, namespace: str = DATA_NAME, clock: Optional[Clock] = None):
        self._state = state
        self._namespace = namespace
        self._clock = clock or _utcnow

    def last_run(self, key: str) -> Optional[datetime]:
        raw = self._state.load(self._namespace).get(key)
        if not raw:
            return None
        try:
            last = datetime.fromisoformat(str(raw))
        except (ValueError, TypeError):
            _log(f"[scheduler] unreadable timestamp for {key}: {raw!r}")
            return None
        if last.tzinfo is None:
            last = last.replace(tzinfo=timezone.utc)
        return last

    def is_due(self, key: str, interval: float) -> bool:
        last = self.last_run(key)
        if last is None:
            return True  # Never run, fire immediately
        elapsed = (self._clock() - last).total_seconds()
        return elapsed >= interval

    def mark_run(self, key: str) -> None:
        self._state.update(self._namespace, {key: self._clock().isoformat()})

    async def schedule_callback(
        self,
        key: str,
        interval: float,
        callback: Callable[[], Awaitable[object]],
    ) -> bool:
        """Run `callback` if due. Returns True when it ran and succeeded.

        A failing callback is logged and not marked, so the next tick retries it.
        """
        if not self.is_due(key, interval):
            return False
        try:
            await callback()
        except Exception as e:
            _log(f"[scheduler] {key} failed: {type(e).__name__}: {e}")
            return False
        self.mark_run(key)
        return True
