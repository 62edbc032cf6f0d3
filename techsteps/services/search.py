# techsteps/services/search.py

"""
 - Web search for the discovery pipeline.
 - Two interchangeable providers behind one contract:
 -     search(query) -> list[SearchCandidate]
 - PrimarySearchProvider:  Tavily-style JSON API (httpx), excerpt included.
 - FallbackSearchProvider: DuckDuckGo HTML results page in a headless
 -                         browser, then ContentExtractor per result URL.
 - Neither provider raises on network or parse problems; both return [].

"""
from __future__ import annotations

from typing import List, Optional, Protocol
from urllib.parse import urlencode

import logging

import httpx
from selectolax.parser import HTMLParser

from techsteps.core.errors import SearchFailure
from techsteps.core.settings import Settings
from techsteps.models.search_class import SearchCandidate
from techsteps.services.extractor import ContentExtractor, PageFetcher, PlaywrightPageFetcher
from techsteps.utils.search_utils import (
    MAX_RESULTS,
    filter_result_links,
    parse_primary_results,
    primary_payload,
)

log = logging.getLogger(__name__)


class SearchProvider(Protocol):
    def search(self, query: str) -> List[SearchCandidate]:
        ...


# ---------------------------------------------------------------------------
# PRIMARY: structured search API
# ---------------------------------------------------------------------------

class PrimarySearchProvider:
    """
    One POST per query: advanced depth, short synthesized answer, max 5
    results. The synthesized answer is requested but not used as a source.
    """

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str = "https://api.tavily.com/search",
        timeout: float = 20.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _post(self, query: str) -> dict:
        payload = primary_payload(query, self.api_key or "", MAX_RESULTS)
        try:
            if self._client is not None:
                resp = self._client.post(self.endpoint, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    resp = client.post(self.endpoint, json=payload)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            raise SearchFailure(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SearchFailure(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise SearchFailure(f"malformed JSON: {e}") from e

    def search(self, query: str) -> List[SearchCandidate]:
        if not self.enabled:
            log.debug("primary search skipped: no API key")
            return []
        try:
            data = self._post(query)
        except SearchFailure as e:
            log.warning("primary search failed for %r: %s", query, e)
            return []
        try:
            results = parse_primary_results(data, MAX_RESULTS)
        except (TypeError, ValueError, AttributeError) as e:
            log.warning("primary search: unusable response for %r (%s: %s)", query, type(e).__name__, e)
            return []
        log.info("primary search: %d results for %r", len(results), query)
        return results


# ---------------------------------------------------------------------------
# FALLBACK: headless browser + scrape
# ---------------------------------------------------------------------------

class FallbackSearchProvider:
    """
    Scrape a public results page, then extract each hit.

    Every browser session (results page and each extracted URL) is opened
    and closed by the PageFetcher inside that single call.
    """

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        extractor: Optional[ContentExtractor] = None,
        search_url: str = "https://html.duckduckgo.com/html/",
    ):
        self.fetcher = fetcher or PlaywrightPageFetcher()
        self.extractor = extractor or ContentExtractor(self.fetcher)
        self.search_url = search_url

    def result_urls(self, query: str) -> List[str]:
        url = f"{self.search_url}?{urlencode({'q': query})}"
        try:
            html = self.fetcher.fetch(url)
        except Exception as e:
            log.warning("fallback search failed for %r (%s: %s)", query, type(e).__name__, e)
            return []
        hrefs = [
            a.attributes.get("href") or ""
            for a in HTMLParser(html).css("a.result__a")
        ]
        return filter_result_links(hrefs, MAX_RESULTS)

    def search(self, query: str) -> List[SearchCandidate]:
        out: List[SearchCandidate] = []
        for url in self.result_urls(query):
            page = self.extractor.extract(url)
            if page is None:
                continue
            out.append(SearchCandidate(title=page.title, body_excerpt=page.body_excerpt, source_url=url))
        log.info("fallback search: %d usable pages for %r", len(out), query)
        return out


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------

def search_with_fallback(
    query: str,
    primary: SearchProvider,
    fallback: SearchProvider,
) -> List[SearchCandidate]:
    """Primary first; the fallback only runs when primary returns nothing."""
    results = primary.search(query)
    if results:
        return results
    log.info("primary search empty for %r; using fallback", query)
    return fallback.search(query)


def build_providers(cfg: Settings) -> tuple[PrimarySearchProvider, FallbackSearchProvider]:
    fetcher = PlaywrightPageFetcher(timeout_ms=cfg.navigation_timeout_ms)
    primary = PrimarySearchProvider(
        api_key=cfg.tavily_api_key,
        endpoint=cfg.tavily_endpoint,
        timeout=cfg.search_timeout_seconds,
    )
    fallback = FallbackSearchProvider(fetcher=fetcher, search_url=cfg.fallback_search_url)
    return primary, fallback
