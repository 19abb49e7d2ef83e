"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ContentClass(str, Enum):
    """What a fetch target is expected to return."""

    MARKUP = "markup"
    LISTING = "listing"


@dataclass
class RawContent:
    """The raw body returned by the first successful retrieval strategy."""

    url: str
    text: str
    strategy: str
    content_class: ContentClass = ContentClass.MARKUP

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class ScoredLine:
    """A single line of cleaned text and its content-quality score."""

    text: str
    score: int


@dataclass
class TruncatedPayload:
    """Extracted page text capped to the configured character limit."""

    url: str
    text: str
    original_length: int
    extracted_length: int

    @property
    def length(self) -> int:
        return len(self.text)
