"""Ordered-fallback fetcher: try each retrieval strategy until one succeeds."""

from __future__ import annotations

from typing import Sequence

from digestor.errors import FetchFailure
from digestor.scraper.models import ContentClass, RawContent
from digestor.scraper.strategies import (
    DirectStrategy,
    ListingJsonStrategy,
    ProxyStrategy,
    ReaderRelayStrategy,
    RetrievalStrategy,
)


class EntityFetcher:
    """Try strategies in declared order; return the first non-empty body.

    Each strategy is attempted at most once per :meth:`fetch` call and there
    is no backoff.  Any exception raised by a strategy (including
    ``httpx.TimeoutException``) counts as that strategy failing.
    """

    def __init__(
        self,
        strategies: Sequence[RetrievalStrategy],
        content_class: ContentClass = ContentClass.MARKUP,
    ) -> None:
        if not strategies:
            raise ValueError("EntityFetcher needs at least one strategy")
        self._strategies = tuple(strategies)
        self.content_class = content_class

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self._strategies]

    def fetch(self, target: str) -> RawContent:
        """Return :class:`RawContent` for *target*.

        Raises:
            FetchFailure: When every strategy failed.  ``errors`` lists the
                reason each one gave.
        """
        errors: list[tuple[str, str]] = []
        for strategy in self._strategies:
            try:
                text = strategy.retrieve(target)
            except Exception as exc:
                print(f"[fetch] {strategy.name} failed for {target!r}: {exc!r:.160}")
                errors.append((strategy.name, str(exc) or type(exc).__name__))
                continue
            if not text or not text.strip():
                print(f"[fetch] {strategy.name} returned an empty body for {target!r}")
                errors.append((strategy.name, "empty response"))
                continue
            return RawContent(
                url=target,
                text=text,
                strategy=strategy.name,
                content_class=self.content_class,
            )

        print(f"[fetch] all strategies exhausted for {target!r}.")
        raise FetchFailure(target, errors)


# ---------------------------------------------------------------------------
# Default fetcher factories
# ---------------------------------------------------------------------------

def build_page_fetcher(timeout: float | None = None) -> EntityFetcher:
    """Direct → reader relay → CORS proxy."""
    return EntityFetcher(
        [
            DirectStrategy(timeout=timeout),
            ReaderRelayStrategy(timeout=timeout),
            ProxyStrategy(timeout=timeout),
        ],
        content_class=ContentClass.MARKUP,
    )


def build_listing_fetcher(timeout: float | None = None) -> EntityFetcher:
    """Single JSON listing strategy."""
    return EntityFetcher(
        [ListingJsonStrategy(timeout=timeout)],
        content_class=ContentClass.LISTING,
    )
