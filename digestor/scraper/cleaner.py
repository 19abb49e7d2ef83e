"""Markup cleaning: turns raw page markup into plain text.

``clean_markup`` runs a fixed sequence of passes; later passes assume the
earlier ones already ran:

    1. drop non-content elements (tree walk)
    2. decode the common-entity table
    3. block tags → newlines
    4. remaining tags → single space
    5. whitespace normalisation
    6. boilerplate-line removal
    7. short-fragment removal
    8. final newline collapse

The function is pure and total: it never raises for string input and never
touches the network.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment, Tag

# ---------------------------------------------------------------------------
# Pass 1: element removal
# ---------------------------------------------------------------------------
_NON_CONTENT_TAGS = [
    "script", "style", "noscript", "nav", "header", "footer", "aside", "form",
]

_DENYLIST_FRAGMENTS = (
    "ad", "advertisement", "banner", "sidebar", "menu", "nav", "footer", "header",
)

# Never removed by the class/id rule, only by tag name.
_PROTECTED_TAGS = frozenset({"html", "body", "main", "article"})

_ATTR_TOKEN_RE = re.compile(r"[^a-z0-9]+")

# ---------------------------------------------------------------------------
# Pass 2: entity table
# ---------------------------------------------------------------------------
_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&mdash;": "—",
    "&ndash;": "–",
    "&hellip;": "...",
    "&bull;": "•",
    "&copy;": "©",
    "&reg;": "®",
    "&trade;": "™",
}

# The parser already turned these entities into characters.
_DECODED_CHARS = {
    "\u00a0": " ",
    "\u2026": "...",
}

# ---------------------------------------------------------------------------
# Passes 3-8: tag flattening and line filters
# ---------------------------------------------------------------------------
_BLOCK_TAG_RE = re.compile(r"</?(?:h[1-6]|p|div|br|li)\b[^>]*>", re.IGNORECASE)
_LIST_TAG_RE = re.compile(r"</?(?:ul|ol|dl)\b[^>]*>", re.IGNORECASE)
_ANY_TAG_RE = re.compile(r"<[^>]*>")

_MULTI_BLANK_RE = re.compile(r"\n\s*\n\s*\n")
_HSPACE_RE = re.compile(r"[^\S\n]+")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

_BOILERPLATE_RE = re.compile(
    "|".join(
        [
            r"skip to (?:main )?content",
            r"click here",
            r"read more",
            r"continue reading",
            r"share this",
            r"follow us",
            r"subscribe",
            r"newsletter",
            r"cookie policy",
            r"privacy policy",
            r"terms of service",
            r"loading\.\.\.",
            r"javascript is disabled",
            r"enable javascript",
            r"\[object Object\]",
            r"\bundefined\b",
            r"\bnull\b",
        ]
    ),
    re.IGNORECASE,
)

_TERMINAL_PUNCTUATION = (".", "!", "?")
_SHORT_LINE_MAX = 10


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _attr_value(tag: Tag, attr: str) -> str:
    value = tag.get(attr)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def _fragment_matches(token: str) -> bool:
    for fragment in _DENYLIST_FRAGMENTS:
        if token == fragment or token == fragment + "s":
            return True
        # Two-letter fragments ("ad") only match whole tokens.
        if len(fragment) > 2 and fragment in token:
            return True
    return False


def _is_boilerplate_container(tag: Tag) -> bool:
    """Return ``True`` when *tag*'s class or id names an ad/nav/chrome block.

    Attribute values are split on non-alphanumerics.  A token matches when it
    contains a longer fragment (``main-nav``, ``leftsidebarpanel``) or equals
    ``ad``/``ads``, so ``loaded`` and ``canvas`` do not.
    """
    if tag.name in _PROTECTED_TAGS:
        return False
    for attr in ("class", "id"):
        value = _attr_value(tag, attr).lower()
        if not value:
            continue
        for token in _ATTR_TOKEN_RE.split(value):
            if token and _fragment_matches(token):
                return True
    return False


def _strip_non_content(markup: str) -> str:
    """Pass 1: remove comments, non-content tags and chrome containers."""
    soup = BeautifulSoup(markup, "html.parser")
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for tag in soup(_NON_CONTENT_TAGS):
        if not tag.decomposed:
            tag.decompose()
    for tag in soup.find_all(_is_boilerplate_container):
        if not tag.decomposed:
            tag.decompose()
    return str(soup)


def _decode_entities(text: str) -> str:
    """Pass 2: literal substitution of the fixed entity table.

    Repeats until nothing changes so double-escaped input (``&amp;amp;``)
    decodes fully.
    """
    previous = None
    while text != previous:
        previous = text
        for entity, replacement in _ENTITIES.items():
            text = text.replace(entity, replacement)
    for char, replacement in _DECODED_CHARS.items():
        text = text.replace(char, replacement)
    return text


def _normalise_whitespace(text: str) -> str:
    """Pass 5: collapse blank runs and horizontal space, trim every line."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _MULTI_BLANK_RE.sub("\n\n", text)
    text = _HSPACE_RE.sub(" ", text)
    return "\n".join(line.strip() for line in text.split("\n"))


def _is_boilerplate_line(line: str) -> bool:
    return _BOILERPLATE_RE.search(line) is not None


def _is_short_fragment(line: str) -> bool:
    trimmed = line.strip()
    return len(trimmed) <= _SHORT_LINE_MAX and not trimmed.endswith(_TERMINAL_PUNCTUATION)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def clean_markup(raw: str) -> str:
    """Return the plain-text candidate for *raw* markup.

    The output contains no ``<...>`` tag sequences and none of the entities
    in the decode table.  Blank lines are dropped by the short-fragment pass,
    so paragraphs come out one per line.
    """
    if not raw:
        return ""

    text = _strip_non_content(raw)
    text = _decode_entities(text)

    text = _BLOCK_TAG_RE.sub("\n", text)
    text = _LIST_TAG_RE.sub("\n\n", text)
    text = _ANY_TAG_RE.sub(" ", text)

    text = _normalise_whitespace(text)

    lines = [line for line in text.split("\n") if not _is_boilerplate_line(line)]
    lines = [line for line in lines if not _is_short_fragment(line)]

    text = "\n".join(lines).strip()
    return _EXCESS_NEWLINES_RE.sub("\n\n", text)
