"""FediringBot: wires the domain services to their adapters."""

import sys
from typing import Optional

from fediring.config import DATA_NAME, AppConfig
from fediring.domain.commands import CommandHandlers
from fediring.domain.members import MemberDirectory
from fediring.domain.permissions import PermissionGate
from fediring.domain.poster import TemplatedPoster
from fediring.domain.requests import PendingRequestLedger
from fediring.domain.router import CommandRouter
from fediring.domain.scheduler import IntervalScheduler
from fediring.domain.selector import MembershipSelector
from fediring.ports.inbound import MentionEvent
from fediring.ports.outbound import ProfileStoragePort, StatePort, StatusPort, TemplatePort

GIT_UPDATE_KEY = "lastGitUpdate"
MEMBER_MENTION_KEY = "lastMemberMention"


def _log(msg: str):
    print(msg, file=sys.stderr)


class FediringBot:
    """Mention-driven manager for the ring's membership list.

    Handles:
    - mentions: routed to a command handler, answered with a templated reply
    - interval tick: refresh the git clone, broadcast random members
    """

    def __init__(
        self,
        config: AppConfig,
        profiles: ProfileStoragePort,
        state: StatePort,
        templates: TemplatePort,
        status: StatusPort,
        repo=None,
        scheduler: Optional[IntervalScheduler] = None,
    ):
        self.config = config
        self._repo = repo
        self.gate = PermissionGate(config.admin_accounts)
        self.ledger = PendingRequestLedger(state, namespace=DATA_NAME)
        self.directory = MemberDirectory(profiles, has_header=config.profiles_have_header)
        self.selector = MembershipSelector(
            self.directory,
            state,
            namespace=DATA_NAME,
            max_history_ratio=config.max_history_ratio,
        )
        self.poster = TemplatedPoster(templates, status, max_length=config.mastodon.max_status_length)
        self.handlers = CommandHandlers(
            gate=self.gate,
            ledger=self.ledger,
            selector=self.selector,
            directory=self.directory,
            poster=self.poster,
            mention_count=config.member_mention_count,
        )
        self.router = CommandRouter(self.handlers.register(), self.poster)
        self.scheduler = scheduler or IntervalScheduler(state, namespace=DATA_NAME)

    async def on_mention(self, event: MentionEvent) -> None:
        await self.router.route(event)

    async def on_interval(self) -> None:
        if self._repo is not None:
            await self.scheduler.schedule_callback(
                GIT_UPDATE_KEY, self.config.git.update_interval, self._repo.update_clone
            )
        await self.scheduler.schedule_callback(
            MEMBER_MENTION_KEY,
            self.config.member_mention_interval,
            self.handlers.mention_members,
        )
