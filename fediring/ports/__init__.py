"""Port interfaces (Hexagonal Architecture)."""

from fediring.ports.inbound import Account, MentionEvent, ReplyContext
from fediring.ports.outbound import (
    PostResult,
    ProfileStoragePort,
    StatePort,
    StatusPort,
    TemplatePort,
)

__all__ = [
    "Account",
    "MentionEvent",
    "ReplyContext",
    "PostResult",
    "ProfileStoragePort",
    "StatePort",
    "StatusPort",
    "TemplatePort",
]
