"""Domain layer: pure Python, no framework dependencies."""

from fediring.domain.commands import COMMAND_DEFINITIONS, CommandHandlers
from fediring.domain.members import MemberDirectory
from fediring.domain.mention_parser import strip_markup, tokenize
from fediring.domain.models import (
    CollaboratorFailure,
    CommandDefinition,
    CommandInvocation,
    DeferredRequest,
    FediringError,
    MissingParameters,
    PermissionDenied,
    RegisteredCommand,
    SelectionHistory,
)
from fediring.domain.permissions import PermissionGate
from fediring.domain.poster import TemplatedPoster, split_status
from fediring.domain.requests import PendingRequestLedger
from fediring.domain.router import CommandRouter, match_command
from fediring.domain.scheduler import IntervalScheduler
from fediring.domain.selector import MembershipSelector

__all__ = [
    "COMMAND_DEFINITIONS",
    "CollaboratorFailure",
    "CommandDefinition",
    "CommandHandlers",
    "CommandInvocation",
    "CommandRouter",
    "DeferredRequest",
    "FediringError",
    "IntervalScheduler",
    "MemberDirectory",
    "MembershipSelector",
    "MissingParameters",
    "PendingRequestLedger",
    "PermissionDenied",
    "PermissionGate",
    "RegisteredCommand",
    "SelectionHistory",
    "TemplatedPoster",
    "match_command",
    "split_status",
    "strip_markup",
    "tokenize",
]
