"""Configuration loaded from the environment."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

# Namespace under which all bot state (history, pending requests, timers) lives
DATA_NAME = "fediring"

DEFAULT_TEMPLATES_PATH = str(Path(__file__).resolve().parent / "templates")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class MastodonConfig:
    base_url: str = ""
    access_token: str = ""
    poll_interval_seconds: int = 30
    max_status_length: int = 500

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.access_token)


@dataclass
class GitConfig:
    command_path: str = "git"
    command_timeout: int = 10  # seconds
    repo_url: str = ""
    update_interval: int = 60 * 10  # seconds
    profiles_path: str = "content/profiles.csv"
    clone_dirname: str = "project"


@dataclass
class AppConfig:
    """Typed configuration for the ring manager bot."""

    mastodon: MastodonConfig = field(default_factory=MastodonConfig)
    git: GitConfig = field(default_factory=GitConfig)
    admin_accounts: List[str] = field(default_factory=list)
    data_path: str = "data"
    templates_path: str = DEFAULT_TEMPLATES_PATH
    member_mention_interval: int = 60 * 60 * 24 * 7  # seconds
    member_mention_count: int = 5
    max_history_ratio: float = 0.5
    profiles_have_header: bool = True

    @property
    def clone_path(self) -> Path:
        return Path(self.data_path) / self.git.clone_dirname

    @property
    def profiles_file(self) -> Path:
        return self.clone_path / self.git.profiles_path

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            mastodon=MastodonConfig(
                base_url=os.getenv("MASTODON_BASE_URL", "").strip().rstrip("/"),
                access_token=os.getenv("MASTODON_ACCESS_TOKEN", "").strip(),
                poll_interval_seconds=_env_int("MASTODON_POLL_INTERVAL", 30),
                max_status_length=_env_int("MASTODON_MAX_STATUS_LENGTH", 500),
            ),
            git=GitConfig(
                command_path=os.getenv("GIT_COMMAND_PATH", "git"),
                command_timeout=_env_int("GIT_COMMAND_TIMEOUT", 10),
                repo_url=os.getenv("GIT_REPO_URL", ""),
                update_interval=_env_int("GIT_UPDATE_INTERVAL", 60 * 10),
                profiles_path=os.getenv("GIT_PROFILES_PATH", "content/profiles.csv"),
            ),
            admin_accounts=_env_list("ADMIN_ACCOUNTS"),
            data_path=os.getenv("DATA_PATH", "data"),
            templates_path=os.getenv("TEMPLATES_PATH", "") or DEFAULT_TEMPLATES_PATH,
            member_mention_interval=_env_int("MEMBER_MENTION_INTERVAL", 60 * 60 * 24 * 7),
            member_mention_count=_env_int("MEMBER_MENTION_COUNT", 5),
            max_history_ratio=_env_float("MAX_HISTORY_RATIO", 0.5),
            profiles_have_header=_env_bool("PROFILES_HAVE_HEADER", True),
        )
