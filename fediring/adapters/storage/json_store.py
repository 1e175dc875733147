"""JSON file-based state storage: implements StatePort."""

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict


def _log(msg: str):
    print(msg, file=sys.stderr)


class JsonStateStore:
    """One JSON object per namespace under `storage_dir`.

    `update` is a shallow merge: top-level keys in `partial` replace the
    stored ones, everything else is kept.
    """

    def __init__(self, storage_dir: str = "data"):
        self._storage_dir = Path(storage_dir)
        self._storage_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, namespace: str) -> Path:
        return self._storage_dir / f"{namespace}.json"

    def load(self, namespace: str) -> Dict[str, Any]:
        path = self._path(namespace)
        if not path.exists():
            return {}
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            _log(f"[json_store] could not read {path}: {e}")
            return {}
        return raw if isinstance(raw, dict) else {}

    def update(self, namespace: str, partial: Dict[str, Any]) -> None:
        data = self.load(namespace)
        data.update(partial)
        self.save(namespace, data)

    def save(self, namespace: str, data: Dict[str, Any]) -> None:
        path = self._path(namespace)
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(data, ensure_ascii=False, indent=2)
        # Atomic write
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent), suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, str(path))
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
