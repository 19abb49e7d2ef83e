"""Reddit listing helpers: profile URL parsing, endpoint URLs, tolerant parsing.

A listing envelope looks like::

    {"data": {"children": [{"kind": "t3", "data": {...}}, ...]}}

Anything that does not match that shape is treated as an empty listing; a
missing field on an item falls back to an empty string or zero.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any

from digestor.errors import MalformedInput
from digestor.reddit.models import RedditComment, RedditPost

_PROFILE_RE = re.compile(r"reddit\.com/user/([^/?#\s]+)")
_REDDIT_BASE = "https://www.reddit.com"
_PERMALINK_BASE = "https://reddit.com"


def extract_username(profile_url: str | None) -> str:
    """Return the username in a ``reddit.com/user/<name>`` URL.

    Raises:
        MalformedInput: If *profile_url* is empty or not a profile URL.
    """
    if not profile_url:
        raise MalformedInput("Profile URL is required")
    match = _PROFILE_RE.search(profile_url)
    if not match:
        raise MalformedInput("Invalid Reddit profile URL")
    return match.group(1)


def submitted_url(username: str, limit: int) -> str:
    return f"{_REDDIT_BASE}/user/{username}/submitted.json?limit={limit}"


def comments_url(username: str, limit: int) -> str:
    return f"{_REDDIT_BASE}/user/{username}/comments.json?limit={limit}"


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

def _text(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    return value if isinstance(value, str) else ""


def _int(item: dict[str, Any], key: str) -> int:
    value = item.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def _created(item: dict[str, Any]) -> str:
    """``created_utc`` as ``M/D/YYYY``, or ``""`` when absent."""
    value = item.get("created_utc")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ""
    try:
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return ""
    return f"{dt.month}/{dt.day}/{dt.year}"


def _permalink(item: dict[str, Any]) -> str:
    permalink = _text(item, "permalink")
    return f"{_PERMALINK_BASE}{permalink}" if permalink else ""


def listing_children(raw: str) -> list[dict[str, Any]]:
    """Return the ``data`` dict of every child in a listing envelope."""
    try:
        envelope = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(envelope, dict):
        return []
    data = envelope.get("data")
    children = data.get("children") if isinstance(data, dict) else None
    if not isinstance(children, list):
        return []
    return [
        child["data"]
        for child in children
        if isinstance(child, dict) and isinstance(child.get("data"), dict)
    ]


# ---------------------------------------------------------------------------
# Public parsers
# ---------------------------------------------------------------------------

def parse_posts(raw: str) -> list[RedditPost]:
    return [
        RedditPost(
            title=_text(item, "title"),
            content=_text(item, "selftext") or _text(item, "url"),
            score=_int(item, "score"),
            comments=_int(item, "num_comments"),
            created=_created(item),
            url=_permalink(item),
            subreddit=_text(item, "subreddit"),
        )
        for item in listing_children(raw)
    ]


def parse_comments(raw: str) -> list[RedditComment]:
    return [
        RedditComment(
            content=_text(item, "body"),
            score=_int(item, "score"),
            created=_created(item),
            url=_permalink(item),
            subreddit=_text(item, "subreddit"),
        )
        for item in listing_children(raw)
    ]


def placeholder_comment(username: str) -> RedditComment:
    """Synthetic stand-in used when a profile yields no items at all."""
    return RedditComment(
        content=(
            f"No public posts or comments could be retrieved for u/{username}. "
            "The profile may be private, suspended, or rate-limited."
        ),
        score=0,
        created="",
        url=f"{_PERMALINK_BASE}/user/{username}",
        subreddit="",
        placeholder=True,
    )
