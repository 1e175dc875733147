"""Membership list mutations (add / remove rows by address)."""

import asyncio
import sys
from typing import List, Optional, Tuple

from fediring.ports.outbound import ProfileStoragePort

HEADER_ROW = ["address"]


def _log(msg: str):
    print(msg, file=sys.stderr)


def split_header(rows: List[List[str]], has_header: bool) -> Tuple[List[List[str]], List[List[str]]]:
    """Return (header_rows, member_rows)."""
    if has_header and rows:
        return rows[:1], rows[1:]
    return [], list(rows)


class MemberDirectory:
    """Serialized read-modify-write access to the shared membership list.

    Field 0 of every row is the member address.
    """

    def __init__(
        self,
        storage: ProfileStoragePort,
        has_header: bool = True,
        lock: Optional[asyncio.Lock] = None,
    ):
        self._storage = storage
        self._has_header = has_header
        self._lock = lock or asyncio.Lock()

    @property
    def has_header(self) -> bool:
        return self._has_header

    async def fetch_members(self) -> List[List[str]]:
        rows = await self._storage.fetch_rows()
        _, members = split_header(rows, self._has_header)
        return members

    async def add_members(self, addresses: List[str]) -> List[str]:
        """Append one row per new address. Returns the addresses actually added.

        Addresses already present, and repeats within `addresses`, are skipped.
        """
        async with self._lock:
            rows = await self._storage.fetch_rows()
            if self._has_header and not rows:
                # First row of the file is always read back as the header
                rows = [list(HEADER_ROW)]
            _, members = split_header(rows, self._has_header)
            known = {row[0] for row in members if row}
            added: List[str] = []
            for address in addresses:
                if address in known:
                    continue
                known.add(address)
                added.append(address)
            if not added:
                _log(f"[members] nothing to add, already present: {addresses}")
                return []
            await self._storage.persist_rows(
                rows + [[address] for address in added],
                message=f"add {' '.join(added)}",
            )
            _log(f"[members] added {added}")
            return added

    async def remove_members(self, addresses: List[str]) -> List[str]:
        """Drop every row whose address is listed. Returns the addresses that were present."""
        async with self._lock:
            rows = await self._storage.fetch_rows()
            header, members = split_header(rows, self._has_header)
            targets = set(addresses)
            kept = [row for row in members if not (row and row[0] in targets)]
            removed = [a for a in dict.fromkeys(addresses) if any(row and row[0] == a for row in members)]
            if not removed:
                _log(f"[members] nothing to remove, not present: {addresses}")
                return []
            await self._storage.persist_rows(
                header + kept,
                message=f"remove {' '.join(removed)}",
            )
            _log(f"[members] removed {removed}")
            return removed
