"""Exceptions shared across the fetch → clean → summarise pipeline."""

from __future__ import annotations


class FetchFailure(Exception):
    """Every retrieval strategy failed for a target.

    ``errors`` holds one ``(strategy_name, message)`` pair per attempt, in the
    order the strategies were tried.
    """

    def __init__(self, target: str, errors: list[tuple[str, str]]) -> None:
        self.target = target
        self.errors = errors
        detail = "; ".join(f"{name}: {msg}" for name, msg in errors)
        super().__init__(f"All fetch methods failed ({detail})" if detail else "All fetch methods failed")


class MalformedInput(ValueError):
    """A request URL is missing or does not have the expected shape."""


class SummarizerFailure(RuntimeError):
    """The language model raised or returned nothing usable."""


class NoContentFound(LookupError):
    """A profile produced no listing items and placeholders are disabled."""
