"""Acquisition pipeline — page summaries and Reddit personas.

``PipelineOrchestrator`` sequences the scraper stages for one request:

    page:    fetch → clean → select → truncate → summarise
    profile: listing fetch (posts, comments) → placeholder policy → persona

It holds only construction-time collaborators (fetchers, summariser,
limits), so one instance serves every request concurrently.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, TypeVar

from digestor.config import Settings
from digestor.errors import FetchFailure, MalformedInput, NoContentFound, SummarizerFailure
from digestor.llm.summarizer import SUMMARY_INSTRUCTION, Summarizer
from digestor.reddit.listing import (
    comments_url,
    extract_username,
    parse_comments,
    parse_posts,
    placeholder_comment,
    submitted_url,
)
from digestor.reddit.models import Citation, ListingBundle, StructuredPersona
from digestor.reddit.persona import build_citations, synthesize_persona
from digestor.scraper.cleaner import clean_markup
from digestor.scraper.fetcher import EntityFetcher, build_listing_fetcher, build_page_fetcher
from digestor.scraper.models import TruncatedPayload
from digestor.scraper.selector import select_content

T = TypeVar("T")

# Labels reported in the scrape response; the set is fixed whatever the provider.
SUMMARIZER_MODEL = "gemini"
SUMMARIZER_CLEANED_ORIGINAL = "cleaned-original"
SUMMARIZER_NONE = "none"


@dataclass
class PageSummary:
    payload: TruncatedPayload
    summarized_text: str
    summarizer: str

    @property
    def scraped_text(self) -> str:
        return self.payload.text


@dataclass
class PersonaReport:
    username: str
    bundle: ListingBundle
    persona: StructuredPersona
    persona_from_model: bool
    citations: List[Citation] = field(default_factory=list)
    analysis_date: str = ""
    processing_time_ms: int = 0


class PipelineOrchestrator:
    """Runs the fetch → clean → select → truncate pipeline and its callers."""

    def __init__(
        self,
        page_fetcher: EntityFetcher,
        listing_fetcher: EntityFetcher,
        summarizer: Summarizer | None = None,
        *,
        max_content_chars: int = 15000,
        min_summary_chars: int = 100,
        allow_placeholder_fallback: bool = True,
        post_limit: int = 50,
        comment_limit: int = 100,
    ) -> None:
        self._page_fetcher = page_fetcher
        self._listing_fetcher = listing_fetcher
        self._summarizer = summarizer
        self.max_content_chars = max_content_chars
        self.min_summary_chars = min_summary_chars
        self.allow_placeholder_fallback = allow_placeholder_fallback
        self.post_limit = post_limit
        self.comment_limit = comment_limit

    @classmethod
    def from_settings(
        cls, settings: Settings, summarizer: Summarizer | None = None
    ) -> "PipelineOrchestrator":
        """Build an orchestrator with the default fetchers and ``settings`` limits."""
        return cls(
            build_page_fetcher(timeout=settings.request_timeout),
            build_listing_fetcher(timeout=settings.request_timeout),
            summarizer,
            max_content_chars=settings.max_content_chars,
            min_summary_chars=settings.min_summary_chars,
            allow_placeholder_fallback=settings.allow_placeholder_fallback,
            post_limit=settings.post_limit,
            comment_limit=settings.comment_limit,
        )

    # ------------------------------------------------------------------
    # Page path
    # ------------------------------------------------------------------

    def acquire(self, url: str) -> TruncatedPayload:
        """Fetch *url* and return its extracted text, hard-cut to the cap.

        Raises:
            FetchFailure: If every page strategy failed.
        """
        raw = self._page_fetcher.fetch(url)
        print(f"[scrape] Raw HTML length: {raw.length} characters (via {raw.strategy})")

        cleaned = clean_markup(raw.text)
        extracted = select_content(cleaned)
        print(f"[scrape] Cleaned content length: {len(extracted)} characters")

        return TruncatedPayload(
            url=url,
            text=extracted[: self.max_content_chars],
            original_length=raw.length,
            extracted_length=len(extracted),
        )

    def summarize_page(self, url: str | None) -> PageSummary:
        """Acquire *url* and summarise it when there is enough text and a model.

        The summariser label is ``"cleaned-original"`` when the text is too
        short or the model failed, ``"none"`` when no model is configured,
        and ``"gemini"`` whenever a model produced the summary, whichever
        provider served it.

        Raises:
            MalformedInput: If *url* is empty.
            FetchFailure: If every page strategy failed.
        """
        if not url:
            raise MalformedInput("URL is required")

        payload = self.acquire(url)
        text = payload.text

        if len(text) <= self.min_summary_chars:
            return PageSummary(payload, text, SUMMARIZER_CLEANED_ORIGINAL)
        if self._summarizer is None:
            return PageSummary(payload, text, SUMMARIZER_NONE)

        try:
            summary = self._summarizer.summarize(SUMMARY_INSTRUCTION, text)
        except SummarizerFailure as exc:
            print(f"[scrape] Summarization failed: {exc}")
            return PageSummary(payload, text, SUMMARIZER_CLEANED_ORIGINAL)

        print(
            f"[scrape] Generated summary length: {len(summary)} characters "
            f"(via {self._summarizer.provider})"
        )
        return PageSummary(payload, summary, SUMMARIZER_MODEL)

    # ------------------------------------------------------------------
    # Listing path
    # ------------------------------------------------------------------

    def _fetch_listing(self, url: str, parse: Callable[[str], List[T]]) -> List[T]:
        try:
            raw = self._listing_fetcher.fetch(url)
        except FetchFailure as exc:
            print(f"[listing] {url} unavailable: {exc}")
            return []
        return parse(raw.text)

    def ingest_listing(self, username: str) -> ListingBundle:
        """Fetch a user's posts and comments.

        Failed or malformed listings count as zero items.  When both come
        back empty and placeholder fallback is enabled, a single synthetic
        comment stands in so the persona step has something to work with.
        """
        posts = self._fetch_listing(submitted_url(username, self.post_limit), parse_posts)
        comments = self._fetch_listing(comments_url(username, self.comment_limit), parse_comments)
        bundle = ListingBundle(username=username, posts=posts, comments=comments)

        if bundle.is_empty and self.allow_placeholder_fallback:
            print(f"[listing] no content for u/{username}; substituting placeholder.")
            bundle.comments = [placeholder_comment(username)]
            bundle.placeholder = True
        return bundle

    def analyze_profile(self, profile_url: str | None) -> PersonaReport:
        """Build a persona report for a ``reddit.com/user/<name>`` URL.

        Raises:
            MalformedInput: If the URL is missing or not a profile URL.
            NoContentFound: If nothing was retrieved and placeholders are off.
        """
        started = time.monotonic()
        username = extract_username(profile_url)
        print(f"[persona] Analyzing Reddit user: {username}")

        bundle = self.ingest_listing(username)
        if bundle.is_empty:
            raise NoContentFound(
                "No posts or comments found. The profile might be private or doesn't exist."
            )
        print(
            f"[persona] Found {len(bundle.real_posts)} posts and "
            f"{len(bundle.real_comments)} comments"
        )

        persona, from_model = synthesize_persona(self._summarizer, bundle)
        today = datetime.now()
        return PersonaReport(
            username=username,
            bundle=bundle,
            persona=persona,
            persona_from_model=from_model,
            citations=build_citations(bundle),
            analysis_date=f"{today.month}/{today.day}/{today.year}",
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )
