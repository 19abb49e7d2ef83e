"""Line scoring: keep lines that look like prose, drop navigation chrome."""

from __future__ import annotations

import re

from digestor.scraper.models import ScoredLine

_CHROME_LABEL_RE = re.compile(r"^(home|about|contact|login|register|search)$", re.IGNORECASE)
_CALL_TO_ACTION_RE = re.compile(r"^(click|tap|select|choose|view|see|more|less)$", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"^[0-9]+$")
_TERMINAL_PUNCTUATION = (".", "!", "?")


def score_line(line: str) -> ScoredLine:
    """Score one line by its shape.  The score depends on nothing else."""
    trimmed = line.strip()
    length = len(trimmed)
    score = 0

    if length > 50:
        score += 2
    if length > 100:
        score += 2
    if trimmed.endswith(_TERMINAL_PUNCTUATION):
        score += 1
    if trimmed[:1].isupper() and trimmed[:1].isascii():
        score += 1
    if len(trimmed.split(" ")) > 8:
        score += 2

    if _CHROME_LABEL_RE.match(trimmed):
        score -= 3
    if _NUMERIC_RE.match(trimmed):
        score -= 2
    if length < 20:
        score -= 1
    if _CALL_TO_ACTION_RE.match(trimmed):
        score -= 2

    return ScoredLine(text=trimmed, score=score)


def select_content(cleaned: str) -> str:
    """Return the positively-scored lines of *cleaned*, blank-line separated.

    When no line scores above zero the input is returned unfiltered, so a
    non-empty input never yields an empty result.
    """
    lines = [line for line in cleaned.split("\n") if line.strip()]
    if not lines:
        return cleaned

    kept = [scored.text for scored in map(score_line, lines) if scored.score > 0]
    return "\n\n".join(kept) if kept else cleaned
