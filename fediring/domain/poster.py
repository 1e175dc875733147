"""Render a named template and publish it as one or more statuses."""

import sys
from typing import Any, Dict, List, Optional

from fediring.domain.models import CollaboratorFailure
from fediring.ports.inbound import ReplyContext
from fediring.ports.outbound import PostResult, StatusPort, TemplatePort


def _log(msg: str):
    print(msg, file=sys.stderr)


def split_status(text: str, limit: int = 500) -> List[str]:
    """Split text into chunks that fit the instance's status length limit.

    Breaks on line boundaries where possible; a single line longer than
    `limit` is cut hard.
    """
    if len(text) <= limit:
        return [text]
    chunks: List[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return [c for c in chunks if c.strip()]


class TemplatedPoster:
    """Replies and broadcasts built from templates."""

    def __init__(self, templates: TemplatePort, status: StatusPort, max_length: int = 500):
        self._templates = templates
        self._status = status
        self._max_length = max_length

    def render(self, name: str, variables: Optional[Dict[str, Any]] = None) -> str:
        try:
            return self._templates.render(name, variables or {})
        except Exception as e:
            raise CollaboratorFailure(f"rendering template {name!r} failed: {e}") from e

    async def reply(
        self,
        name: str,
        context: ReplyContext,
        variables: Optional[Dict[str, Any]] = None,
    ) -> List[PostResult]:
        """Post a templated reply in the thread and visibility of `context`."""
        text = self.render(name, variables)
        _log(f"[poster] reply {name} to {context.status_id} ({context.visibility})")
        return await self._post(text, context.visibility, context.status_id)

    async def broadcast(
        self,
        name: str,
        variables: Optional[Dict[str, Any]] = None,
        visibility: str = "public",
    ) -> List[PostResult]:
        """Post a templated status that is not a reply to anything."""
        text = self.render(name, variables)
        _log(f"[poster] broadcast {name} ({visibility})")
        return await self._post(text, visibility, None)

    async def _post(self, text: str, visibility: str, in_reply_to_id: Optional[str]) -> List[PostResult]:
        results: List[PostResult] = []
        reply_to = in_reply_to_id
        for chunk in split_status(text, self._max_length):
            result = await self._status.post_status(
                chunk, visibility=visibility, in_reply_to_id=reply_to
            )
            if not result.success:
                raise CollaboratorFailure(f"posting status failed: {result.error}")
            results.append(result)
            # Keep multi-part messages threaded
            reply_to = result.post_id or reply_to
        return results
