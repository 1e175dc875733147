"""Mention command handlers and their registration order.

Handlers post their own replies. Admin checks happen inside each handler so a
non-admin call fails before any state is touched.

Registration order matters for matching (see `router.match_command`):
`help` and the request commands come before the membership commands, so
"help defer" is help and "cancel add me" is a cancel.
"""

import sys
from typing import Dict, List

from fediring.domain.members import MemberDirectory
from fediring.domain.models import (
    CommandDefinition,
    CommandHandler,
    CommandInvocation,
    MissingParameters,
    RegisteredCommand,
)
from fediring.domain.permissions import PermissionGate
from fediring.domain.poster import TemplatedPoster
from fediring.domain.requests import PendingRequestLedger
from fediring.domain.selector import MembershipSelector
from fediring.ports.inbound import Account

SELF_TOKEN = "me"

COMMAND_DEFINITIONS: List[CommandDefinition] = [
    CommandDefinition(
        token="help",
        handler_id="help",
        description="List supported commands",
        usage="help",
    ),
    CommandDefinition(
        token="pending",
        handler_id="pending",
        description="List pending requests",
        usage="pending",
        admin_only=True,
    ),
    CommandDefinition(
        token="defer",
        handler_id="defer",
        description="Add request to the pending list",
        usage="defer add me",
        admin_only=True,
    ),
    CommandDefinition(
        token="cancel",
        handler_id="cancel",
        description="Remove request from the pending list",
        usage="cancel add me",
        admin_only=True,
    ),
    CommandDefinition(
        token="flush",
        handler_id="flush",
        description="Clear out the list of pending requests",
        usage="flush",
        admin_only=True,
    ),
    CommandDefinition(
        token="add",
        handler_id="add",
        description="Add a new member (e.g. add me)",
        usage="add me",
    ),
    CommandDefinition(
        token="remove",
        handler_id="remove",
        description="Remove an existing member (e.g. remove me)",
        usage="remove me",
    ),
    CommandDefinition(
        token="random",
        handler_id="random",
        description="Mention one random member",
        usage="random",
    ),
    CommandDefinition(
        token="mention",
        handler_id="mention",
        description="Mention a random selection of members",
        usage="mention",
        admin_only=True,
    ),
]


def _log(msg: str):
    print(msg, file=sys.stderr)


class CommandHandlers:
    """One coroutine per command, composed from the domain services."""

    def __init__(
        self,
        gate: PermissionGate,
        ledger: PendingRequestLedger,
        selector: MembershipSelector,
        directory: MemberDirectory,
        poster: TemplatedPoster,
        mention_count: int = 5,
        definitions: List[CommandDefinition] = COMMAND_DEFINITIONS,
    ):
        self._gate = gate
        self._ledger = ledger
        self._selector = selector
        self._directory = directory
        self._poster = poster
        self._mention_count = mention_count
        self._definitions = list(definitions)

    def handler_map(self) -> Dict[str, CommandHandler]:
        return {
            "add": self.add,
            "remove": self.remove,
            "random": self.random,
            "mention": self.mention,
            "help": self.help,
            "pending": self.pending,
            "defer": self.defer,
            "cancel": self.cancel,
            "flush": self.flush,
        }

    def register(self) -> List[RegisteredCommand]:
        """Bind every definition to its handler, failing fast on unknown ids."""
        handlers = self.handler_map()
        registered: List[RegisteredCommand] = []
        for definition in self._definitions:
            handler = handlers.get(definition.handler_id)
            if handler is None:
                raise ValueError(
                    f"no handler for command {definition.token!r} (id={definition.handler_id!r})"
                )
            registered.append(RegisteredCommand(definition=definition, handler=handler))
        return registered

    def resolve_members(self, params: List[str], account: Account) -> List[str]:
        """`me` stands for the caller; explicit addresses need an admin."""
        if params and params[0] == SELF_TOKEN:
            return [account.acct, *params[1:]]
        self._gate.require_admin(account)
        return list(params)

    # -- Membership --

    async def add(self, inv: CommandInvocation) -> None:
        await self._change_membership(inv, "add")

    async def remove(self, inv: CommandInvocation) -> None:
        await self._change_membership(inv, "remove")

    async def _change_membership(self, inv: CommandInvocation, action: str) -> None:
        account = inv.account
        members = self.resolve_members(inv.params, account)
        if not members:
            raise MissingParameters(inv.command)

        request = " ".join([action, *members])
        variables = {"members": " ".join(members), "account": account}

        if not self._gate.is_admin(account):
            await self._ledger.add(request, account.acct)
            await self._poster.reply(
                f"command-{action}-deferred", inv.event.reply_context, variables
            )
            return

        if action == "add":
            changed = await self._directory.add_members(members)
        else:
            changed = await self._directory.remove_members(members)
        await self._ledger.cancel(request)

        variables["changed"] = " ".join(changed)
        await self._poster.reply(f"command-{action}", inv.event.reply_context, variables)

    async def random(self, inv: CommandInvocation) -> None:
        selection = await self._selector.select_random(1)
        member = selection[0] if selection else None
        await self._poster.reply(
            "command-random",
            inv.event.reply_context,
            {"member": member, "account": inv.account},
        )

    async def mention(self, inv: CommandInvocation) -> None:
        self._gate.require_admin(inv.account)
        await self.mention_members()

    async def mention_members(self) -> List[str]:
        """Broadcast a shout-out for a random handful of members."""
        members = await self._selector.select_random(self._mention_count)
        if not members:
            _log("[commands] no members available to mention")
            return []
        await self._poster.broadcast("mention-members", {"members": members})
        return members

    # -- Help --

    async def help(self, inv: CommandInvocation) -> None:
        is_admin = self._gate.is_admin(inv.account)
        commands = [d for d in self._definitions if is_admin or not d.admin_only]
        await self._poster.reply(
            "command-help",
            inv.event.reply_context,
            {"commands": commands, "account": inv.account, "is_admin": is_admin},
        )

    # -- Pending requests --

    async def pending(self, inv: CommandInvocation) -> None:
        self._gate.require_admin(inv.account)
        requests = await self._ledger.list()
        await self._poster.reply(
            "command-pending",
            inv.event.reply_context,
            {"requests": requests, "account": inv.account},
        )

    async def defer(self, inv: CommandInvocation) -> None:
        self._gate.require_admin(inv.account)
        if not inv.params:
            raise MissingParameters(inv.command)
        request = await self._ledger.add(" ".join(inv.params), inv.account.acct)
        await self._poster.reply(
            "command-defer",
            inv.event.reply_context,
            {"request": request, "account": inv.account},
        )

    async def cancel(self, inv: CommandInvocation) -> None:
        self._gate.require_admin(inv.account)
        request = await self._ledger.cancel(" ".join(inv.params))
        await self._poster.reply(
            "command-cancel",
            inv.event.reply_context,
            {"request": request, "text": " ".join(inv.params), "account": inv.account},
        )

    async def flush(self, inv: CommandInvocation) -> None:
        self._gate.require_admin(inv.account)
        await self._ledger.flush()
        await self._poster.reply(
            "command-flush", inv.event.reply_context, {"account": inv.account}
        )
