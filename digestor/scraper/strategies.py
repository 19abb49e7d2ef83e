"""Retrieval strategies for the fetcher chain.

Page strategies (tried in this order by the default page fetcher):
  1. Direct    — plain GET with desktop-browser headers.
  2. Reader    — the r.jina.ai text-extraction relay.
  3. Proxy     — the allorigins CORS proxy (JSON envelope, ``contents`` field).

Listing strategy:
  * ListingJson — GET a JSON listing endpoint with an API-friendly user agent.

All strategies share one interface: ``retrieve(url) -> str``.  A strategy
*raises* on any failure (network error, timeout, non-2xx status, missing
payload) and the :class:`~digestor.scraper.fetcher.EntityFetcher` moves on to
the next one.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from urllib.parse import quote

import httpx

from digestor.config import settings

DESKTOP_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Upgrade-Insecure-Requests": "1",
}

LISTING_HEADERS = {
    "User-Agent": "RedditPersonaAnalyzer/1.0 (by /u/PersonaBot)",
    "Accept": "application/json",
}


class StrategyError(Exception):
    """A single strategy could not produce content."""


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class RetrievalStrategy(ABC):
    """One way of turning a URL into raw text."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = settings.request_timeout if timeout is None else timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Short strategy name used in log lines and failure reports."""

    @abstractmethod
    def retrieve(self, url: str) -> str:
        """Return the raw body for *url*.  Raise on failure."""

    def _get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        with httpx.Client(
            headers=headers,
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
        if response.is_error:
            raise StrategyError(f"{self.name} fetch failed: {response.status_code}")
        return response


# ---------------------------------------------------------------------------
# Page strategies
# ---------------------------------------------------------------------------

class DirectStrategy(RetrievalStrategy):
    """Fetch the page itself, looking as much like a desktop browser as we can."""

    @property
    def name(self) -> str:
        return "direct"

    def retrieve(self, url: str) -> str:
        return self._get(url, headers=DESKTOP_HEADERS).text


class ReaderRelayStrategy(RetrievalStrategy):
    """Ask a text-extraction relay (r.jina.ai by default) to fetch the page."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        super().__init__(timeout)
        self.base_url = base_url or settings.reader_relay_url

    @property
    def name(self) -> str:
        return "reader"

    def retrieve(self, url: str) -> str:
        return self._get(f"{self.base_url}{url}", headers=DESKTOP_HEADERS).text


class ProxyStrategy(RetrievalStrategy):
    """Go through a CORS-bypass proxy that wraps the page in ``{"contents": ...}``."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        super().__init__(timeout)
        self.base_url = base_url or settings.cors_proxy_url

    @property
    def name(self) -> str:
        return "proxy"

    def retrieve(self, url: str) -> str:
        response = self._get(f"{self.base_url}?url={quote(url, safe='')}")
        try:
            data = response.json()
        except ValueError as exc:
            raise StrategyError(f"proxy returned non-JSON body: {exc}") from exc
        contents = data.get("contents") if isinstance(data, dict) else None
        if not isinstance(contents, str):
            raise StrategyError("proxy response has no 'contents' field")
        return contents


# ---------------------------------------------------------------------------
# Listing strategy
# ---------------------------------------------------------------------------

class ListingJsonStrategy(RetrievalStrategy):
    """Fetch a structured JSON listing; the body must decode to an object."""

    @property
    def name(self) -> str:
        return "listing"

    def retrieve(self, url: str) -> str:
        response = self._get(url, headers=LISTING_HEADERS)
        try:
            data = json.loads(response.text)
        except ValueError as exc:
            raise StrategyError(f"listing returned non-JSON body: {exc}") from exc
        if not isinstance(data, dict):
            raise StrategyError("listing body is not a JSON object")
        return response.text
