"""Domain data models: pure Python dataclasses."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List

from fediring.ports.inbound import Account, MentionEvent


class FediringError(Exception):
    """Base class for errors raised by command handling."""


class PermissionDenied(FediringError):
    def __init__(self, acct: str):
        super().__init__(f"{acct} is not an admin account")
        self.acct = acct


class CollaboratorFailure(FediringError):
    """Storage, templating, git or network call failed."""


class MissingParameters(FediringError):
    def __init__(self, token: str):
        super().__init__(f"command {token!r} needs parameters")
        self.token = token


@dataclass(frozen=True)
class CommandDefinition:
    token: str
    handler_id: str
    description: str
    usage: str
    admin_only: bool = False


@dataclass
class CommandInvocation:
    """What a handler receives: the matched token, its params and the event."""

    command: str
    params: List[str]
    event: MentionEvent

    @property
    def account(self) -> Account:
        return self.event.account


CommandHandler = Callable[[CommandInvocation], Awaitable[None]]


@dataclass
class RegisteredCommand:
    definition: CommandDefinition
    handler: CommandHandler

    @property
    def token(self) -> str:
        return self.definition.token


@dataclass(frozen=True)
class DeferredRequest:
    """A membership change waiting for an admin. Keyed by `request` text."""

    request: str
    sender: str  # acct of the requester ("from" on disk)

    @property
    def key(self) -> str:
        return self.request

    def to_dict(self) -> Dict[str, str]:
        return {"request": self.request, "from": self.sender}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeferredRequest":
        return cls(request=str(data.get("request", "")), sender=str(data.get("from", "")))


@dataclass
class SelectionHistory:
    """Recently selected addresses, most recent first."""

    addresses: List[str] = field(default_factory=list)

    def truncated(self, limit: int) -> "SelectionHistory":
        return SelectionHistory(self.addresses[: max(0, limit)])

    def with_selection(self, selected: List[str]) -> "SelectionHistory":
        return SelectionHistory(list(selected) + self.addresses)
