"""Inbound port: platform-agnostic mention representation."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Account:
    """The account that mentioned the bot. `acct` is its stable handle."""

    acct: str
    display_name: str = ""


@dataclass(frozen=True)
class ReplyContext:
    """Where a reply to a mention has to go. Passed through untouched."""

    status_id: Optional[str] = None
    visibility: str = "public"


@dataclass
class MentionEvent:
    """A status that mentions the bot, with its raw (HTML) text."""

    account: Account
    text: str
    reply_context: ReplyContext = field(default_factory=ReplyContext)
