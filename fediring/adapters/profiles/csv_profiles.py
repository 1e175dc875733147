"""CSV membership file kept in the git clone: implements ProfileStoragePort."""

import csv
import io
import sys
from typing import List

from fediring.adapters.git.repository import GitRepository
from fediring.domain.models import CollaboratorFailure


def _log(msg: str):
    print(msg, file=sys.stderr)


def parse_rows(content: str) -> List[List[str]]:
    """Parse CSV text into rows of fields, skipping blank lines."""
    return [row for row in csv.reader(io.StringIO(content)) if row]


def format_rows(rows: List[List[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue()


class CsvProfileStorage:
    """Reads the membership CSV after refreshing the clone; writes then pushes."""

    def __init__(self, repo: GitRepository, profiles_path: str = "content/profiles.csv"):
        self._repo = repo
        self._profiles_path = profiles_path

    @property
    def profiles_file(self):
        return self._repo.clone_path / self._profiles_path

    async def fetch_rows(self) -> List[List[str]]:
        await self._repo.update_clone()
        try:
            content = self.profiles_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            _log(f"[profiles] {self._profiles_path} missing, treating as empty")
            return []
        except OSError as e:
            raise CollaboratorFailure(f"reading {self._profiles_path} failed: {e}") from e
        return parse_rows(content)

    async def persist_rows(self, rows: List[List[str]], message: str) -> None:
        path = self.profiles_file
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(format_rows(rows), encoding="utf-8")
        except OSError as e:
            raise CollaboratorFailure(f"writing {self._profiles_path} failed: {e}") from e
        await self._repo.push(self._profiles_path, message)
        _log(f"[profiles] pushed {len(rows)} row(s): {message}")
