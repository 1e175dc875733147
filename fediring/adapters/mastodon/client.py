"""Mastodon REST client using aiohttp: implements StatusPort."""

import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp

from fediring.domain.models import CollaboratorFailure
from fediring.ports.outbound import PostResult


def _log(msg: str):
    print(msg, file=sys.stderr)


@dataclass
class MentionNotification:
    """The parts of a mention notification the bot cares about."""

    notification_id: str
    acct: str
    display_name: str
    status_id: str
    content: str
    visibility: str


def parse_mention(data: Dict[str, Any]) -> Optional[MentionNotification]:
    status = data.get("status") or {}
    account = data.get("account") or status.get("account") or {}
    if data.get("type") != "mention" or not status or not account.get("acct"):
        return None
    return MentionNotification(
        notification_id=str(data.get("id", "")),
        acct=str(account["acct"]),
        display_name=str(account.get("display_name", "")),
        status_id=str(status.get("id", "")),
        content=str(status.get("content", "")),
        visibility=str(status.get("visibility", "public")),
    )


class MastodonClient:
    """Async client for the handful of Mastodon endpoints the bot uses."""

    def __init__(self, base_url: str, access_token: str, timeout: float = 30.0):
        self._base_url = base_url.rstrip("/")
        self._access_token = access_token
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url and self._access_token)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self._base_url}{path}"
        async with aiohttp.ClientSession(timeout=self._timeout) as session:
            async with session.request(method, url, headers=self._headers(), **kwargs) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise CollaboratorFailure(f"{method} {path}: HTTP {resp.status}: {body[:200]}")
                return await resp.json()

    async def verify_credentials(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/v1/accounts/verify_credentials")

    async def post_status(
        self,
        text: str,
        visibility: str = "public",
        in_reply_to_id: Optional[str] = None,
    ) -> PostResult:
        payload: Dict[str, Any] = {"status": text, "visibility": visibility}
        if in_reply_to_id:
            payload["in_reply_to_id"] = in_reply_to_id
        try:
            data = await self._request("POST", "/api/v1/statuses", json=payload)
        except Exception as e:
            _log(f"[mastodon] post failed: {e}")
            return PostResult(success=False, text=text, error=str(e))
        if "id" not in data:
            return PostResult(success=False, text=text, error=str(data.get("error", data)))
        return PostResult(success=True, post_id=str(data["id"]), text=text)

    async def _fetch_page(self, min_id: Optional[str], limit: int) -> List[Dict[str, Any]]:
        params: List[tuple] = [("types[]", "mention"), ("limit", str(limit))]
        if min_id:
            params.append(("min_id", min_id))
        return await self._request("GET", "/api/v1/notifications", params=params) or []

    async def fetch_mentions(
        self,
        min_id: Optional[str] = None,
        limit: int = 30,
        max_pages: int = 10,
    ) -> List[MentionNotification]:
        """Mention notifications newer than `min_id`, oldest first.

        With `min_id`, pages are walked forward from it until one comes back
        empty (or `max_pages` is hit; the rest is picked up on the next call).
        Without it, only the newest page is returned.
        """
        items: List[Dict[str, Any]] = []
        cursor = min_id
        for _ in range(max_pages):
            page = await self._fetch_page(cursor, limit)
            if not page:
                break
            # Each page is newest first
            items.extend(reversed(page))
            if not min_id:
                break
            cursor = str(page[0].get("id", ""))
        return [m for m in (parse_mention(item) for item in items) if m]
