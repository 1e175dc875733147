"""Random member selection with an anti-repeat window.

Every call records its picks at the front of a persisted selection history
and skips anything still in that history. The history is cut back whenever it
would leave fewer than `count` candidates, and it never grows past
`max_history_ratio` of the membership, so a shrinking ring cannot starve the
selection.
"""

import asyncio
import random
import sys
from typing import List, Optional

from fediring.config import DATA_NAME
from fediring.domain.members import MemberDirectory
from fediring.domain.models import SelectionHistory
from fediring.ports.outbound import StatePort

STATE_KEY = "selectionHistory"


def _log(msg: str):
    print(msg, file=sys.stderr)


class MembershipSelector:
    def __init__(
        self,
        directory: MemberDirectory,
        state: StatePort,
        namespace: str = DATA_NAME,
        max_history_ratio: float = 0.5,
        rng: Optional[random.Random] = None,
        lock: Optional[asyncio.Lock] = None,
    ):
        self._directory = directory
        self._state = state
        self._namespace = namespace
        self._max_history_ratio = max_history_ratio
        self._rng = rng or random.Random()
        self._lock = lock or asyncio.Lock()

    async def select_random(self, count: int) -> List[str]:
        """Pick up to `count` distinct addresses not chosen recently."""
        count = max(0, int(count))
        async with self._lock:
            members = await self._directory.fetch_members()
            history = self.load_history()

            profiles_count = len(members)
            if len(history.addresses) + count >= profiles_count:
                history = history.truncated(profiles_count - count)

            recent = set(history.addresses)
            candidates = [
                address
                for address in dict.fromkeys(row[0] for row in members if row and row[0])
                if address not in recent
            ]
            self._rng.shuffle(candidates)
            selection = candidates[:count]

            max_history = int(profiles_count * self._max_history_ratio)
            self.save_history(history.with_selection(selection).truncated(max_history))
            _log(f"[selector] selected {selection} from {profiles_count} member(s)")
            return selection

    def load_history(self) -> SelectionHistory:
        raw = self._state.load(self._namespace).get(STATE_KEY) or []
        return SelectionHistory([str(a) for a in raw if isinstance(a, str)])

    def save_history(self, history: SelectionHistory) -> None:
        self._state.update(self._namespace, {STATE_KEY: history.addresses})
