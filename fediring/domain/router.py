"""Command router: turns a mention into a handler call.

Matching walks the registered commands in order and picks the first one
whose token appears anywhere in the mention (not only as the first word).
When several tokens are present, registration order decides, not position
in the text. The matched token and everything after it become the
invocation; earlier words are ignored.
"""

import sys
from typing import List, Optional, Sequence, Tuple

from fediring.domain.mention_parser import tokenize
from fediring.domain.models import CommandInvocation, RegisteredCommand
from fediring.domain.poster import TemplatedPoster
from fediring.ports.inbound import MentionEvent

UNKNOWN_COMMAND_TEMPLATE = "unknown-command"
ERROR_TEMPLATE = "error"


def _log(msg: str):
    print(msg, file=sys.stderr)


def match_command(
    commands: Sequence[RegisteredCommand], tokens: List[str]
) -> Optional[Tuple[RegisteredCommand, List[str]]]:
    """Return (command, [token, *params]) for the first registered command found in tokens."""
    for command in commands:
        try:
            idx = tokens.index(command.token)
        except ValueError:
            continue
        return command, tokens[idx:]
    return None


class CommandRouter:
    def __init__(self, commands: Sequence[RegisteredCommand], poster: TemplatedPoster):
        tokens = [c.token for c in commands]
        duplicates = {t for t in tokens if tokens.count(t) > 1}
        if duplicates:
            raise ValueError(f"duplicate command tokens: {sorted(duplicates)}")
        self._commands = list(commands)
        self._poster = poster

    @property
    def commands(self) -> List[RegisteredCommand]:
        return list(self._commands)

    async def route(self, event: MentionEvent) -> None:
        """Dispatch one mention. Never raises; failures become an error reply."""
        tokens = tokenize(event.text)
        acct = event.account.acct
        variables = {"account": event.account}

        matched = match_command(self._commands, tokens)
        if matched is None:
            _log(f"[router] unknown command from {acct}: {tokens}")
            await self._safe_reply(UNKNOWN_COMMAND_TEMPLATE, event, variables)
            return

        command, (token, *params) = matched
        invocation = CommandInvocation(command=token, params=params, event=event)
        _log(f"[router] command={token} params={params} from={acct}")
        try:
            await command.handler(invocation)
        except Exception as e:
            _log(f"[router] command {token} failed for {acct}: {type(e).__name__}: {e}")
            await self._safe_reply(ERROR_TEMPLATE, event, {**variables, "command": token})

    async def _safe_reply(self, name: str, event: MentionEvent, variables: dict) -> None:
        try:
            await self._poster.reply(name, event.reply_context, variables)
        except Exception as e:
            _log(f"[router] could not post {name} reply: {type(e).__name__}: {e}")
