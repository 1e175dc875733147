"""Tests for the command handlers, driven through the router."""

import pytest

from conftest import ADMIN, BotHarness, make_event
from fediring.domain.commands import COMMAND_DEFINITIONS, CommandHandlers
from fediring.domain.models import CommandDefinition, DeferredRequest


async def _pending(h):
    return [(r.request, r.sender) for r in await h.ledger.list()]


class TestRegistration:
    def test_every_definition_has_a_handler(self, harness):
        tokens = [c.token for c in harness.handlers.register()]
        assert tokens == [d.token for d in COMMAND_DEFINITIONS]

    def test_registration_order(self):
        tokens = [d.token for d in COMMAND_DEFINITIONS]
        assert tokens == [
            "help", "pending", "defer", "cancel", "flush", "add", "remove", "random", "mention",
        ]

    def test_unknown_handler_id_fails_fast(self, harness):
        handlers = CommandHandlers(
            gate=harness.gate,
            ledger=harness.ledger,
            selector=harness.selector,
            directory=harness.directory,
            poster=harness.poster,
            definitions=[CommandDefinition("dance", "dance", "Dance", "dance")],
        )
        with pytest.raises(ValueError):
            handlers.register()


class TestAdd:
    @pytest.mark.asyncio
    async def test_non_admin_add_me_is_deferred(self):
        h = BotHarness(rows=[])
        await h.router.route(make_event("@bot add me", acct="alice"))
        assert await _pending(h) == [("add alice", "alice")]
        assert h.profiles.rows == []
        assert h.rendered == ["command-add-deferred"]
        assert h.last_vars()["members"] == "alice"

    @pytest.mark.asyncio
    async def test_admin_add_me_is_applied(self):
        h = BotHarness(rows=[], admins=("alice",))
        await h.router.route(make_event("@bot add me", acct="alice"))
        assert h.profiles.rows == [["alice"]]
        assert await _pending(h) == []
        assert h.state.writes == 0
        assert h.rendered == ["command-add"]
        assert h.last_vars()["changed"] == "alice"

    @pytest.mark.asyncio
    async def test_admin_add_fulfils_pending_request(self):
        h = BotHarness(rows=[["alice"]])
        await h.ledger.add("add bob", "bob")
        await h.router.route(make_event("@bot add bob", acct=ADMIN))
        assert h.profiles.rows == [["alice"], ["bob"]]
        assert await _pending(h) == []

    @pytest.mark.asyncio
    async def test_non_admin_cannot_add_others(self):
        h = BotHarness(rows=[])
        await h.router.route(make_event("@bot add mallory", acct="alice"))
        assert await _pending(h) == []
        assert h.profiles.rows == []
        assert h.rendered == ["error"]

    @pytest.mark.asyncio
    async def test_add_without_params(self):
        h = BotHarness(rows=[])
        await h.router.route(make_event("@bot add", acct=ADMIN))
        assert h.profiles.commits == []
        assert h.rendered == ["error"]

    @pytest.mark.asyncio
    async def test_repeat_request_collapses(self):
        h = BotHarness(rows=[])
        await h.router.route(make_event("@bot add me", acct="alice"))
        await h.router.route(make_event("@bot add me", acct="alice"))
        assert await _pending(h) == [("add alice", "alice")]


class TestRemove:
    @pytest.mark.asyncio
    async def test_admin_remove(self):
        h = BotHarness(rows=[["alice"], ["bob"], ["carol"]])
        await h.router.route(make_event("@bot remove bob", acct=ADMIN))
        assert h.profiles.rows == [["alice"], ["carol"]]
        assert h.rendered == ["command-remove"]

    @pytest.mark.asyncio
    async def test_non_admin_remove_me_is_deferred(self):
        h = BotHarness(rows=[["alice"], ["bob"]])
        await h.router.route(make_event("@bot remove me", acct="bob"))
        assert await _pending(h) == [("remove bob", "bob")]
        assert h.profiles.rows == [["alice"], ["bob"]]
        assert h.rendered == ["command-remove-deferred"]


class TestRandomAndMention:
    @pytest.mark.asyncio
    async def test_random_replies_with_member(self):
        h = BotHarness(rows=[["alice"], ["bob"]])
        await h.router.route(make_event("@bot random"))
        assert h.rendered == ["command-random"]
        assert h.last_vars()["member"] in ("alice", "bob")

    @pytest.mark.asyncio
    async def test_random_on_empty_membership(self):
        h = BotHarness(rows=[])
        await h.router.route(make_event("@bot random"))
        assert h.last_vars()["member"] is None

    @pytest.mark.asyncio
    async def test_admin_mention_broadcasts(self):
        h = BotHarness(rows=[[m] for m in ("a", "b", "c", "d")], mention_count=2)
        await h.router.route(make_event("@bot mention", acct=ADMIN))
        assert h.rendered == ["mention-members"]
        assert len(h.last_vars()["members"]) == 2
        assert h.status.posts[0]["visibility"] == "public"
        assert h.status.posts[0]["in_reply_to_id"] is None

    @pytest.mark.asyncio
    async def test_non_admin_mention_denied(self):
        h = BotHarness(rows=[["a"], ["b"]])
        await h.router.route(make_event("@bot mention", acct="alice"))
        assert h.rendered == ["error"]
        assert h.state.writes == 0

    @pytest.mark.asyncio
    async def test_mention_members_skips_empty(self):
        h = BotHarness(rows=[])
        assert await h.handlers.mention_members() == []
        assert h.status.posts == []


class TestHelp:
    @pytest.mark.asyncio
    async def test_non_admin_sees_public_commands(self):
        h = BotHarness()
        await h.router.route(make_event("@bot help", acct="alice"))
        tokens = [d.token for d in h.last_vars()["commands"]]
        assert tokens == ["help", "add", "remove", "random"]
        assert h.last_vars()["is_admin"] is False

    @pytest.mark.asyncio
    async def test_admin_sees_everything(self):
        h = BotHarness()
        await h.router.route(make_event("@bot help", acct=ADMIN))
        assert len(h.last_vars()["commands"]) == len(COMMAND_DEFINITIONS)

    @pytest.mark.asyncio
    async def test_help_beats_random(self):
        h = BotHarness(rows=[["alice"]])
        await h.router.route(make_event("@bot random help"))
        assert h.rendered == ["command-help"]

    @pytest.mark.asyncio
    async def test_help_beats_admin_command_for_non_admin(self):
        h = BotHarness()
        await h.router.route(make_event("@bot help defer", acct="alice"))
        assert h.rendered == ["command-help"]

    @pytest.mark.asyncio
    async def test_cancel_beats_add(self):
        h = BotHarness()
        await h.ledger.add("add alice", "alice")
        await h.router.route(make_event("@bot cancel add alice", acct=ADMIN))
        assert h.rendered == ["command-cancel"]
        assert h.profiles.commits == []


class TestPendingRequests:
    @pytest.mark.asyncio
    async def test_pending_lists_requests(self):
        h = BotHarness()
        await h.ledger.add("add alice", "alice")
        await h.router.route(make_event("@bot pending", acct=ADMIN))
        assert h.last_vars()["requests"] == [DeferredRequest("add alice", "alice")]

    @pytest.mark.asyncio
    async def test_defer_adds_free_text(self):
        h = BotHarness()
        await h.router.route(make_event("@bot defer add carol", acct=ADMIN))
        assert await _pending(h) == [("add carol", ADMIN)]
        assert h.rendered == ["command-defer"]

    @pytest.mark.asyncio
    async def test_defer_requires_text(self):
        h = BotHarness()
        await h.router.route(make_event("@bot defer", acct=ADMIN))
        assert await _pending(h) == []
        assert h.rendered == ["error"]

    @pytest.mark.asyncio
    async def test_non_admin_defer_denied(self):
        h = BotHarness()
        await h.router.route(make_event("@bot defer add carol", acct="alice"))
        assert await _pending(h) == []
        assert h.rendered == ["error"]

    @pytest.mark.asyncio
    async def test_cancel_removes_request(self):
        h = BotHarness()
        await h.ledger.add("add alice", "alice")
        await h.router.route(make_event("@bot cancel add alice", acct=ADMIN))
        assert await _pending(h) == []
        assert h.last_vars()["request"] == DeferredRequest("add alice", "alice")

    @pytest.mark.asyncio
    async def test_cancel_absent_request(self):
        h = BotHarness()
        await h.ledger.add("add alice", "alice")
        writes = h.state.writes
        await h.router.route(make_event("@bot cancel add carol", acct=ADMIN))
        assert h.state.writes == writes
        assert h.last_vars()["request"] is None
        assert h.last_vars()["text"] == "add carol"

    @pytest.mark.asyncio
    async def test_flush(self):
        h = BotHarness()
        await h.ledger.add("add alice", "alice")
        await h.ledger.add("remove bob", "bob")
        await h.router.route(make_event("@bot flush", acct=ADMIN))
        assert await _pending(h) == []
        assert h.rendered == ["command-flush"]

    @pytest.mark.asyncio
    async def test_non_admin_flush_denied(self):
        h = BotHarness()
        await h.ledger.add("add alice", "alice")
        await h.router.route(make_event("@bot flush", acct="alice"))
        assert await _pending(h) == [("add alice", "alice")]


class TestUnknownCommand:
    @pytest.mark.asyncio
    async def test_no_state_touched(self):
        h = BotHarness(rows=[["alice"]])
        await h.router.route(make_event("@bot good morning"))
        assert h.rendered == ["unknown-command"]
        assert h.state.writes == 0
        assert h.profiles.commits == []
        assert h.profiles.fetches == 0


class TestEmptyMembershipWithHeader:
    @pytest.mark.asyncio
    async def test_admin_add_me_twice_then_remove(self):
        h = BotHarness(rows=[], has_header=True)
        await h.router.route(make_event("@bot add me", acct=ADMIN))
        assert h.profiles.rows == [["address"], [ADMIN]]
        await h.router.route(make_event("@bot add me", acct=ADMIN))
        assert h.profiles.rows == [["address"], [ADMIN]]
        await h.router.route(make_event("@bot remove me", acct=ADMIN))
        assert h.profiles.rows == [["address"]]
        assert h.rendered == ["command-add", "command-add", "command-remove"]
