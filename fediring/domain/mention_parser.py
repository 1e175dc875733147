"""Mention text → command tokens.

Statuses arrive as HTML. Line breaks become whitespace, markup is removed,
entities are decoded, and any word starting with "@" (the bot's own handle
and any other mentioned account) is dropped.
"""

import html
import re
from typing import List

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLOCK_END_RE = re.compile(r"</(p|div|li|h[1-6])\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"[\n\r\s]+")


def strip_markup(content: str) -> str:
    """Return the plain text of an HTML status body."""
    text = _BR_RE.sub("\n", content or "")
    text = _BLOCK_END_RE.sub("\n", text)
    text = _TAG_RE.sub("", text)
    return html.unescape(text)


def tokenize(content: str) -> List[str]:
    """Split a status body into words, without mentions."""
    words = _WS_RE.split(strip_markup(content))
    return [word for word in words if word and not word.startswith("@")]
