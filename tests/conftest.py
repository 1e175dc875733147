"""Shared mock ports for domain and bot tests."""

import copy
import random

import pytest

from fediring.domain.commands import CommandHandlers
from fediring.domain.members import MemberDirectory
from fediring.domain.permissions import PermissionGate
from fediring.domain.poster import TemplatedPoster
from fediring.domain.requests import PendingRequestLedger
from fediring.domain.router import CommandRouter
from fediring.domain.selector import MembershipSelector
from fediring.ports.inbound import Account, MentionEvent, ReplyContext
from fediring.ports.outbound import PostResult


class MemoryState:
    """StatePort kept in a dict; counts writes."""

    def __init__(self, initial=None):
        self.data = copy.deepcopy(initial or {})
        self.writes = 0

    def load(self, namespace):
        return copy.deepcopy(self.data.get(namespace, {}))

    def update(self, namespace, partial):
        self.writes += 1
        self.data.setdefault(namespace, {}).update(copy.deepcopy(partial))


class MemoryProfiles:
    """ProfileStoragePort over a list of rows."""

    def __init__(self, rows=None):
        self.rows = [list(r) for r in (rows or [])]
        self.commits = []
        self.fetches = 0

    async def fetch_rows(self):
        self.fetches += 1
        return [list(r) for r in self.rows]

    async def persist_rows(self, rows, message):
        self.rows = [list(r) for r in rows]
        self.commits.append(message)


class MockTemplates:
    """TemplatePort that records calls and renders the template name."""

    def __init__(self):
        self.calls = []

    def render(self, name, variables):
        self.calls.append((name, dict(variables)))
        return name


class MockStatus:
    """StatusPort that records posted statuses."""

    def __init__(self, fail=False):
        self.posts = []
        self.fail = fail

    async def post_status(self, text, visibility="public", in_reply_to_id=None):
        self.posts.append({"text": text, "visibility": visibility, "in_reply_to_id": in_reply_to_id})
        if self.fail:
            return PostResult(success=False, text=text, error="boom")
        return PostResult(success=True, post_id=str(len(self.posts)), text=text)


ADMIN = "admin@ring.example"


def make_event(text, acct="alice", status_id="s1", visibility="unlisted"):
    return MentionEvent(
        account=Account(acct=acct),
        text=text,
        reply_context=ReplyContext(status_id=status_id, visibility=visibility),
    )


class BotHarness:
    """All domain services wired against in-memory ports."""

    def __init__(self, rows=None, admins=(ADMIN,), has_header=False, mention_count=5, seed=1):
        self.state = MemoryState()
        self.profiles = MemoryProfiles(rows)
        self.templates = MockTemplates()
        self.status = MockStatus()
        self.gate = PermissionGate(admins)
        self.ledger = PendingRequestLedger(self.state)
        self.directory = MemberDirectory(self.profiles, has_header=has_header)
        self.selector = MembershipSelector(
            self.directory, self.state, rng=random.Random(seed)
        )
        self.poster = TemplatedPoster(self.templates, self.status)
        self.handlers = CommandHandlers(
            gate=self.gate,
            ledger=self.ledger,
            selector=self.selector,
            directory=self.directory,
            poster=self.poster,
            mention_count=mention_count,
        )
        self.router = CommandRouter(self.handlers.register(), self.poster)

    @property
    def rendered(self):
        return [name for name, _ in self.templates.calls]

    def last_vars(self):
        return self.templates.calls[-1][1]


@pytest.fixture
def state():
    return MemoryState()


@pytest.fixture
def harness():
    return BotHarness()
