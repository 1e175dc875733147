"""Fediring manager: mention-driven membership bot for a fediverse ring."""

from fediring.config import __version__, AppConfig, DATA_NAME
from fediring.bot import FediringBot

__all__ = [
    "__version__",
    "AppConfig",
    "DATA_NAME",
    "FediringBot",
]
