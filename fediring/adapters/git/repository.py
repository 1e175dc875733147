"""Local clone of the ring's git repository, driven through the git CLI."""

import asyncio
import os
import shutil
import sys
from pathlib import Path
from typing import List, Tuple

from fediring.domain.models import CollaboratorFailure


def _log(msg: str):
    print(msg, file=sys.stderr)


async def _run_subprocess(cmd_args: List[str], cwd: str):
    """Run a subprocess command and return process/stdout/stderr."""
    proc = await asyncio.create_subprocess_exec(
        *cmd_args,
        cwd=cwd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    return proc, stdout, stderr


class GitRepository:
    """Clone / pull / commit / push for a single working copy."""

    def __init__(
        self,
        repo_url: str,
        data_path: str,
        clone_dirname: str = "project",
        git: str = "git",
        timeout: float = 10.0,
    ):
        self._repo_url = repo_url
        self._data_path = Path(data_path)
        self._clone_dirname = clone_dirname
        self._git = git
        self._timeout = timeout

    @property
    def clone_path(self) -> Path:
        return self._data_path / self._clone_dirname

    async def _exec(self, args: List[str], cwd: Path) -> Tuple[str, str]:
        cmd = [self._git, *args]
        # Never log the repo URL, it carries credentials
        _log(f"[git] exec: git {args[0]} (cwd={cwd})")
        try:
            proc, stdout, stderr = await asyncio.wait_for(
                _run_subprocess(cmd, str(cwd)),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            raise CollaboratorFailure(f"git {args[0]} timed out ({self._timeout}s)")
        out = stdout.decode("utf-8", errors="replace").strip()
        err = stderr.decode("utf-8", errors="replace").strip()
        if proc.returncode != 0:
            raise CollaboratorFailure(f"git {args[0]} exit code {proc.returncode}: {err or out}")
        return out, err

    def _clone_usable(self) -> bool:
        path = self.clone_path
        return path.is_dir() and os.access(path, os.R_OK | os.W_OK) and (path / ".git").exists()

    async def update_clone(self) -> None:
        """Pull the latest changes, re-cloning when the working copy is unusable."""
        if self._clone_usable():
            try:
                await self.pull()
                return
            except CollaboratorFailure as e:
                _log(f"[git] pull failed, re-cloning: {e}")
        await self.clone()

    async def clone(self) -> None:
        shutil.rmtree(self.clone_path, ignore_errors=True)
        self._data_path.mkdir(parents=True, exist_ok=True)
        await self._exec(["clone", self._repo_url, self._clone_dirname], self._data_path)

    async def pull(self) -> None:
        await self._exec(["reset", "--hard"], self.clone_path)
        await self._exec(["pull", "--rebase"], self.clone_path)

    async def push(self, path: str, message: str) -> None:
        """Commit `path` (relative to the clone) and push it."""
        await self._exec(["add", path], self.clone_path)
        await self._exec(["commit", "-m", message], self.clone_path)
        await self._exec(["push"], self.clone_path)
