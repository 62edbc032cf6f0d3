# techsteps/services/extractor.py

"""
 - Headless-browser page fetching and body-text extraction.
 - Only used on the fallback search path; primary search
 - results already carry an excerpt.

"""

from __future__ import annotations

from typing import Optional, Protocol
import logging
import re

from playwright.sync_api import sync_playwright
from selectolax.parser import HTMLParser

from techsteps.core.errors import ExtractionFailure
from techsteps.models.search_class import ExtractedPage

log = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = 10_000
MAX_BODY_CHARS = 3000
MIN_BODY_CHARS = 200

BOILERPLATE_TAGS = ["nav", "footer", "script", "style"]

_BLANK_LINES_RE = re.compile(r"\n\s*\n+")
_SPACES_RE = re.compile(r"[ \t\r\f\v]+")


# ---------------------------------------------------------------------------
# PAGE FETCHERS
# ---------------------------------------------------------------------------

class PageFetcher(Protocol):
    def fetch(self, url: str) -> str:
        """Return the rendered HTML of url, or raise."""
        ...


class PlaywrightPageFetcher:
    """
    One headless Chromium session per fetch.

    The browser is launched right before navigation and closed in a
    finally block, so an exception or timeout can never leak a session
    into the next candidate.
    """

    def __init__(self, timeout_ms: int = NAVIGATION_TIMEOUT_MS):
        self.timeout_ms = timeout_ms

    def fetch(self, url: str) -> str:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            try:
                page = browser.new_page()
                page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
                return page.content()
            finally:
                browser.close()


# ---------------------------------------------------------------------------
# HTML → (title, body)
# ---------------------------------------------------------------------------

def _visible_text(html: str) -> tuple[str, str]:
    tree = HTMLParser(html)
    title_node = tree.css_first("title")
    title = title_node.text(strip=True) if title_node else ""

    tree.strip_tags(BOILERPLATE_TAGS)
    root = tree.body or tree.root
    if root is None:
        return title, ""

    text = root.text(separator="\n")
    text = _SPACES_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n", text)
    return title, text.strip()


def html_to_page(html: str) -> ExtractedPage:
    """
    Strip boilerplate and cut the body to MAX_BODY_CHARS.

    Raises ExtractionFailure when there is not enough text left.
    """
    title, body = _visible_text(html)
    body = body[:MAX_BODY_CHARS]
    if len(body) < MIN_BODY_CHARS:
        raise ExtractionFailure(f"only {len(body)} chars of body text")
    return ExtractedPage(title=title, body_excerpt=body)


class ContentExtractor:
    def __init__(self, fetcher: Optional[PageFetcher] = None):
        self.fetcher = fetcher or PlaywrightPageFetcher()

    def extract(self, url: str) -> Optional[ExtractedPage]:
        """
        Fetch url and return its title + first ~3000 chars of visible text.

        Never raises: navigation errors, timeouts and thin pages all
        come back as None.
        """
        try:
            html = self.fetcher.fetch(url)
            return html_to_page(html)
        except ExtractionFailure as e:
            log.info("extract %s: dropped (%s)", url, e)
        except Exception as e:
            log.info("extract %s: fetch failed (%s: %s)", url, type(e).__name__, e)
        return None
