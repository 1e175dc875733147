"""Pending request ledger: deferred membership changes awaiting an admin.

Requests are kept as a set keyed by their text: two people asking for the
same change collapse into one entry, and the first requester is kept. The
whole list is loaded fresh and written back in full on every mutation.
"""

import asyncio
import sys
from typing import List, Optional

from fediring.config import DATA_NAME
from fediring.domain.models import DeferredRequest
from fediring.ports.outbound import StatePort

STATE_KEY = "pendingRequests"


def _log(msg: str):
    print(msg, file=sys.stderr)


class PendingRequestLedger:
    """Add, cancel, list and flush deferred requests."""

    def __init__(
        self,
        state: StatePort,
        namespace: str = DATA_NAME,
        lock: Optional[asyncio.Lock] = None,
    ):
        self._state = state
        self._namespace = namespace
        self._lock = lock or asyncio.Lock()

    async def add(self, request: str, sender: str) -> DeferredRequest:
        """Queue a request. Returns the stored entry (existing one if the text is already queued)."""
        async with self._lock:
            requests = self._load()
            for existing in requests:
                if existing.key == request:
                    return existing
            entry = DeferredRequest(request=request, sender=sender)
            requests.append(entry)
            self._save(requests)
            _log(f"[requests] deferred {request!r} from {sender}")
            return entry

    async def cancel(self, request: str) -> Optional[DeferredRequest]:
        """Drop a request by exact text. Missing requests are not an error."""
        async with self._lock:
            requests = self._load()
            for idx, existing in enumerate(requests):
                if existing.key == request:
                    del requests[idx]
                    self._save(requests)
                    _log(f"[requests] cancelled {request!r}")
                    return existing
            return None

    async def list(self) -> List[DeferredRequest]:
        async with self._lock:
            return self._load()

    async def flush(self) -> None:
        async with self._lock:
            self._save([])
            _log("[requests] flushed all pending requests")

    def _load(self) -> List[DeferredRequest]:
        raw = self._state.load(self._namespace).get(STATE_KEY) or []
        requests: List[DeferredRequest] = []
        for item in raw:
            if isinstance(item, dict) and item.get("request") is not None:
                requests.append(DeferredRequest.from_dict(item))
        return requests

    def _save(self, requests: List[DeferredRequest]) -> None:
        self._state.update(self._namespace, {STATE_KEY: [r.to_dict() for r in requests]})
