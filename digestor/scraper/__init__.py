"""Scraper package — ordered-fallback fetch, markup cleaning & line selection."""

from digestor.scraper.cleaner import clean_markup
from digestor.scraper.fetcher import EntityFetcher, build_listing_fetcher, build_page_fetcher
from digestor.scraper.models import ContentClass, RawContent, ScoredLine, TruncatedPayload
from digestor.scraper.selector import score_line, select_content

__all__ = [
    "EntityFetcher",
    "build_page_fetcher",
    "build_listing_fetcher",
    "clean_markup",
    "select_content",
    "score_line",
    "ContentClass",
    "RawContent",
    "ScoredLine",
    "TruncatedPayload",
]
