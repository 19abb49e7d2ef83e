"""Tests for the acquisition pipeline orchestrator.

Mocking strategy:
- Page fetching uses in-memory fake strategies inside a real
  ``EntityFetcher``.
- Listing fetching goes through the real ``ListingJsonStrategy`` with
  ``respx`` standing in for reddit.com.
- The language model is a ``MagicMock`` wrapped in a real ``Summarizer``.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from digestor.errors import FetchFailure, MalformedInput, NoContentFound
from digestor.llm.summarizer import Summarizer
from digestor.pipeline import PipelineOrchestrator
from digestor.scraper.fetcher import EntityFetcher, build_listing_fetcher
from digestor.scraper.strategies import RetrievalStrategy, StrategyError

_URL = "https://example.com/article"
_REDDIT = "https://www.reddit.com/user/kojied/"

_POSTS_JSON = {
    "kind": "Listing",
    "data": {
        "children": [
            {
                "kind": "t3",
                "data": {
                    "title": "My first mechanical keyboard build",
                    "selftext": "Lubed the switches myself.",
                    "score": 42,
                    "num_comments": 7,
                    "created_utc": 1700000000,
                    "permalink": "/r/MechanicalKeyboards/comments/abc/my_first_build/",
                    "subreddit": "MechanicalKeyboards",
                },
            }
        ]
    },
}

_COMMENTS_JSON = {
    "data": {
        "children": [
            {
                "data": {
                    "body": "Tactile switches are the best for typing all day.",
                    "score": 3,
                    "created_utc": 1700000000,
                    "permalink": "/r/MechanicalKeyboards/comments/abc/_/c1/",
                    "subreddit": "MechanicalKeyboards",
                }
            }
        ]
    }
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _StaticStrategy(RetrievalStrategy):
    def __init__(self, body: str | None) -> None:
        super().__init__(timeout=1.0)
        self._body = body

    @property
    def name(self) -> str:
        return "static"

    def retrieve(self, url: str) -> str:
        if self._body is None:
            raise StrategyError("static fetch failed: 503")
        return self._body


def _page_fetcher(body: str | None) -> EntityFetcher:
    return EntityFetcher([_StaticStrategy(body)])


def _summarizer(content: str = "Model summary.", exc: Exception | None = None) -> Summarizer:
    model = MagicMock()
    if exc is not None:
        model.invoke.side_effect = exc
    else:
        model.invoke.return_value = SimpleNamespace(content=content)
    return Summarizer(model, "gemini")


def _orchestrator(
    page_body: str | None = None,
    summarizer: Summarizer | None = None,
    **kwargs,
) -> PipelineOrchestrator:
    return PipelineOrchestrator(
        _page_fetcher(page_body),
        build_listing_fetcher(timeout=5),
        summarizer,
        **kwargs,
    )


def _long_article(repeat: int = 400) -> str:
    return "<p>" + "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * repeat + "</p>"


# ---------------------------------------------------------------------------
# acquire
# ---------------------------------------------------------------------------

class TestAcquire:
    def test_truncates_to_cap_exactly(self) -> None:
        payload = _orchestrator(_long_article()).acquire(_URL)

        assert payload.extracted_length > 15000
        assert payload.length == 15000
        assert payload.original_length == len(_long_article())

    def test_short_text_unchanged(self) -> None:
        html = "<p>Short article sentence that is perfectly fine.</p>"
        payload = _orchestrator(html).acquire(_URL)

        assert payload.text == "Short article sentence that is perfectly fine."
        assert payload.extracted_length == payload.length

    def test_custom_cap_is_a_hard_character_cut(self) -> None:
        html = "<p>Short article sentence that is perfectly fine.</p>"
        payload = _orchestrator(html, max_content_chars=10).acquire(_URL)

        assert payload.text == "Short arti"

    def test_nav_chrome_removed_before_selection(self) -> None:
        html = (
            "<p>Hello world, this is a test sentence with enough words to score "
            "positively right here.</p><nav>Home</nav>"
        )
        payload = _orchestrator(html).acquire(_URL)

        assert payload.text == (
            "Hello world, this is a test sentence with enough words to score "
            "positively right here."
        )

    def test_fetch_failure_propagates(self) -> None:
        with pytest.raises(FetchFailure):
            _orchestrator(None).acquire(_URL)


# ---------------------------------------------------------------------------
# summarize_page
# ---------------------------------------------------------------------------

class TestSummarizePage:
    def test_missing_url(self) -> None:
        with pytest.raises(MalformedInput):
            _orchestrator(_long_article()).summarize_page("")

    def test_short_text_skips_model(self) -> None:
        summarizer = _summarizer()
        html = "<p>" + "A" * 49 + ".</p>"

        result = _orchestrator(html, summarizer).summarize_page(_URL)

        assert len(result.scraped_text) == 50
        assert result.summarizer == "cleaned-original"
        assert result.summarized_text == result.scraped_text
        summarizer._model.invoke.assert_not_called()

    def test_model_summary(self) -> None:
        summarizer = _summarizer("A tidy summary of the article.")

        result = _orchestrator(_long_article(5), summarizer).summarize_page(_URL)

        assert result.summarizer == "gemini"
        assert result.summarized_text == "A tidy summary of the article."
        summarizer._model.invoke.assert_called_once()

    @pytest.mark.parametrize("provider", ["openai", "ollama"])
    def test_label_is_fixed_for_every_provider(self, provider: str) -> None:
        model = MagicMock()
        model.invoke.return_value = SimpleNamespace(content="Summary from another provider.")

        result = _orchestrator(_long_article(5), Summarizer(model, provider)).summarize_page(_URL)

        assert result.summarizer == "gemini"
        assert result.summarized_text == "Summary from another provider."

    def test_model_failure_falls_back_to_extracted_text(self) -> None:
        summarizer = _summarizer(exc=RuntimeError("quota exceeded"))

        result = _orchestrator(_long_article(5), summarizer).summarize_page(_URL)

        assert result.summarizer == "cleaned-original"
        assert result.summarized_text == result.scraped_text

    def test_empty_model_output_falls_back(self) -> None:
        result = _orchestrator(_long_article(5), _summarizer("  ")).summarize_page(_URL)

        assert result.summarizer == "cleaned-original"

    def test_no_model_configured(self) -> None:
        result = _orchestrator(_long_article(5), None).summarize_page(_URL)

        assert result.summarizer == "none"
        assert result.summarized_text == result.scraped_text


# ---------------------------------------------------------------------------
# Listing path
# ---------------------------------------------------------------------------

def _mock_listings(posts: httpx.Response, comments: httpx.Response) -> None:
    respx.get(url__startswith="https://www.reddit.com/user/kojied/submitted.json").mock(
        return_value=posts
    )
    respx.get(url__startswith="https://www.reddit.com/user/kojied/comments.json").mock(
        return_value=comments
    )


class TestIngestListing:
    def test_parses_posts_and_comments(self) -> None:
        with respx.mock:
            _mock_listings(
                httpx.Response(200, json=_POSTS_JSON),
                httpx.Response(200, json=_COMMENTS_JSON),
            )
            bundle = _orchestrator().ingest_listing("kojied")

        assert [p.title for p in bundle.posts] == ["My first mechanical keyboard build"]
        assert bundle.comments[0].content.startswith("Tactile switches")
        assert bundle.placeholder is False

    def test_requests_configured_limits(self) -> None:
        with respx.mock:
            posts = respx.get(url__startswith="https://www.reddit.com/user/kojied/submitted.json").mock(
                return_value=httpx.Response(200, json=_POSTS_JSON)
            )
            comments = respx.get(url__startswith="https://www.reddit.com/user/kojied/comments.json").mock(
                return_value=httpx.Response(200, json=_COMMENTS_JSON)
            )
            _orchestrator(post_limit=5, comment_limit=7).ingest_listing("kojied")

        assert posts.calls.last.request.url.params["limit"] == "5"
        assert comments.calls.last.request.url.params["limit"] == "7"

    def test_failed_listings_get_placeholder(self) -> None:
        with respx.mock:
            _mock_listings(httpx.Response(404), httpx.Response(429))
            bundle = _orchestrator().ingest_listing("kojied")

        assert bundle.placeholder is True
        assert bundle.posts == []
        assert len(bundle.comments) == 1
        assert bundle.comments[0].placeholder is True
        assert bundle.real_comments == []

    def test_placeholder_disabled_leaves_bundle_empty(self) -> None:
        with respx.mock:
            _mock_listings(
                httpx.Response(200, json={"data": {"children": []}}),
                httpx.Response(200, json={"data": {"children": []}}),
            )
            bundle = _orchestrator(allow_placeholder_fallback=False).ingest_listing("kojied")

        assert bundle.is_empty
        assert bundle.placeholder is False

    def test_one_listing_failing_is_not_fatal(self) -> None:
        with respx.mock:
            _mock_listings(httpx.Response(500), httpx.Response(200, json=_COMMENTS_JSON))
            bundle = _orchestrator().ingest_listing("kojied")

        assert bundle.posts == []
        assert len(bundle.comments) == 1
        assert bundle.placeholder is False


class TestAnalyzeProfile:
    def test_invalid_url(self) -> None:
        with pytest.raises(MalformedInput):
            _orchestrator().analyze_profile("https://example.com/user/kojied")

    def test_no_content_without_placeholder(self) -> None:
        with respx.mock:
            _mock_listings(httpx.Response(404), httpx.Response(404))
            with pytest.raises(NoContentFound):
                _orchestrator(allow_placeholder_fallback=False).analyze_profile(_REDDIT)

    def test_placeholder_profile_gets_fallback_persona(self) -> None:
        with respx.mock:
            _mock_listings(httpx.Response(404), httpx.Response(404))
            report = _orchestrator(summarizer=_summarizer(exc=RuntimeError("down"))).analyze_profile(_REDDIT)

        assert report.username == "kojied"
        assert report.persona.name == "Reddit User kojied"
        assert report.persona_from_model is False
        assert report.citations == []

    def test_model_persona(self) -> None:
        persona_json = '{"name": "Maya Chen", "traits": ["Detail-oriented"]}'
        with respx.mock:
            _mock_listings(
                httpx.Response(200, json=_POSTS_JSON),
                httpx.Response(200, json=_COMMENTS_JSON),
            )
            report = _orchestrator(summarizer=_summarizer(persona_json)).analyze_profile(_REDDIT)

        assert report.persona.name == "Maya Chen"
        assert report.persona_from_model is True
        assert [c.type for c in report.citations] == ["post", "comment"]
        assert report.analysis_date
        assert report.processing_time_ms >= 0
