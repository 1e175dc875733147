"""Polling loop that feeds mentions to the bot and drives its interval tick."""

import asyncio
import sys
from typing import Awaitable, Callable, Optional

from fediring.adapters.mastodon.client import MastodonClient, MentionNotification
from fediring.config import DATA_NAME
from fediring.ports.inbound import Account, MentionEvent, ReplyContext
from fediring.ports.outbound import StatePort

LAST_NOTIFICATION_KEY = "lastNotificationId"


def _log(msg: str):
    print(msg, file=sys.stderr)


def to_event(mention: MentionNotification) -> MentionEvent:
    """Convert a Mastodon notification to a platform-agnostic MentionEvent."""
    return MentionEvent(
        account=Account(acct=mention.acct, display_name=mention.display_name),
        text=mention.content,
        reply_context=ReplyContext(status_id=mention.status_id, visibility=mention.visibility),
    )


class MastodonRunner:
    """Handles mentions one at a time, then runs the interval hook, then sleeps."""

    def __init__(
        self,
        client: MastodonClient,
        state: StatePort,
        on_mention: Callable[[MentionEvent], Awaitable[None]],
        on_interval: Callable[[], Awaitable[None]],
        poll_interval: float = 30.0,
        namespace: str = DATA_NAME,
    ):
        self._client = client
        self._state = state
        self._on_mention = on_mention
        self._on_interval = on_interval
        self._poll_interval = poll_interval
        self._namespace = namespace
        self._own_acct: Optional[str] = None
        self._stopped = asyncio.Event()

    def stop(self) -> None:
        self._stopped.set()

    async def poll_once(self) -> int:
        """Route every new mention. Returns how many were handled.

        Without a stored cursor (first start, lost state) nothing is routed:
        the newest mention becomes the cursor and older ones are skipped.
        """
        last_id = self._state.load(self._namespace).get(LAST_NOTIFICATION_KEY)
        mentions = await self._client.fetch_mentions(min_id=last_id)
        if not last_id:
            # "0" when there is no history yet, so the first real mention is routed
            newest = mentions[-1].notification_id if mentions else "0"
            self._state.update(self._namespace, {LAST_NOTIFICATION_KEY: newest})
            _log(f"[runner] no cursor, skipped {len(mentions)} old mention(s), cursor={newest}")
            return 0
        handled = 0
        for mention in mentions:
            if self._own_acct and mention.acct == self._own_acct:
                _log(f"[runner] skipping own mention {mention.notification_id}")
            else:
                await self._on_mention(to_event(mention))
                handled += 1
            # Advance per mention so a crash never replays handled ones
            self._state.update(self._namespace, {LAST_NOTIFICATION_KEY: mention.notification_id})
        return handled

    async def tick(self) -> None:
        try:
            await self.poll_once()
        except Exception as e:
            _log(f"[runner] polling mentions failed: {type(e).__name__}: {e}")
        try:
            await self._on_interval()
        except Exception as e:
            _log(f"[runner] interval tick failed: {type(e).__name__}: {e}")

    async def run(self) -> None:
        try:
            me = await self._client.verify_credentials()
            self._own_acct = me.get("acct")
            _log(f"[runner] logged in as {self._own_acct}")
        except Exception as e:
            _log(f"[runner] verify_credentials failed: {e}")

        while not self._stopped.is_set():
            await self.tick()
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                pass
