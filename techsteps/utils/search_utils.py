# techsteps/utils/search_utils.py

"""
 - URL / domain helpers for the search providers.
 - Primary (API) response parsing lives here too so the
 - provider classes stay thin.

"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import parse_qs, unquote, urlparse

import logging

from techsteps.models.search_class import SearchCandidate

log = logging.getLogger(__name__)

MAX_RESULTS = 5

# Links pointing back at search engines / ad networks are never sources.
SELF_REFERENTIAL_DOMAINS = (
    "duckduckgo",
    "google",
    "bing.com",
    "doubleclick",
)


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

def extract_domain(url: str) -> str:
    """Return domain portion (lowercased) without leading www."""
    try:
        netloc = urlparse(url).netloc.lower()
    except ValueError:
        return ""
    return netloc[4:] if netloc.startswith("www.") else netloc


def unwrap_redirect(href: str) -> str:
    """
    DuckDuckGo's HTML endpoint wraps results as //duckduckgo.com/l/?uddg=<url>.
    Return the target URL when present, else href unchanged.
    """
    try:
        parsed = urlparse(href)
    except ValueError:
        return href
    target = parse_qs(parsed.query).get("uddg")
    if target:
        return unquote(target[0])
    return href


def is_self_referential(url: str) -> bool:
    dom = extract_domain(url)
    return not dom or any(s in dom for s in SELF_REFERENTIAL_DOMAINS)


def filter_result_links(hrefs: Iterable[str], limit: int = MAX_RESULTS) -> List[str]:
    """
    Unwrap redirect links, drop search/ad domains and non-http links,
    dedupe, and cap at `limit`. Order is preserved.
    """
    out: List[str] = []
    seen: set[str] = set()
    for href in hrefs:
        url = unwrap_redirect((href or "").strip())
        if not url.startswith(("http://", "https://")):
            continue
        if is_self_referential(url):
            continue
        if url in seen:
            continue
        seen.add(url)
        out.append(url)
        if len(out) >= limit:
            break
    return out


# ---------------------------------------------------------------------------
# Primary search response parsing
# ---------------------------------------------------------------------------

def _str_field(item: Dict[str, Any], key: str) -> Optional[str]:
    """Missing or null -> "", a string -> itself, anything else -> None."""
    v = item.get(key)
    if v is None:
        return ""
    return v if isinstance(v, str) else None


def parse_primary_results(data: Any, limit: int = MAX_RESULTS) -> List[SearchCandidate]:
    """
    Turn a Tavily-style response body into candidates.

    Expected: {"answer": "...", "results": [{"title", "content", "url"}, ...]}
    Anything else is treated as "no results".
    """
    if not isinstance(data, dict):
        log.warning("primary search: response is not an object")
        return []
    items = data.get("results")
    if not isinstance(items, list):
        log.warning("primary search: response has no results list")
        return []

    out: List[SearchCandidate] = []
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        url = _str_field(item, "url")
        title = _str_field(item, "title")
        content = _str_field(item, "content")
        if not url or not url.strip() or title is None or content is None:
            skipped += 1
            continue
        out.append(SearchCandidate(title=title, body_excerpt=content, source_url=url.strip()))
        if len(out) >= limit:
            break
    if skipped:
        log.warning("primary search: skipped %d malformed results", skipped)
    return out


def primary_payload(query: str, api_key: str, max_results: int = MAX_RESULTS) -> Dict[str, Any]:
    return {
        "api_key": api_key,
        "query": query,
        "search_depth": "advanced",
        "include_answer": True,
        "max_results": max_results,
    }
