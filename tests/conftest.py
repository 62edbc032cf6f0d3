"""
Shared factories and fakes for the TechSteps test-suite.

Nothing here touches the network or a real browser: search providers,
page fetchers and the LLM are all replaced with in-memory fakes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from techsteps.models.guide_class import DraftGuide, Guide
from techsteps.models.search_class import SearchCandidate


# ============================================================================
# FACTORIES
# ============================================================================

def make_guide_dict(
    guide_id: str = "guide-1",
    title: str = "Fix Wi-Fi No Internet",
    description: str = "Steps to restore internet over Wi-Fi",
    keywords: Optional[List[str]] = None,
    category: str = "wifi",
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """Factory for an on-disk (camelCase) guide record."""
    rec: Dict[str, Any] = {
        "id": guide_id,
        "title": title,
        "problemDescription": description,
        "keywords": ["wifi", "internet", "connection"] if keywords is None else keywords,
        "category": category,
        "steps": [{"id": "step-1", "title": "Restart the router", "content": "Unplug it for 30s."}],
        "alternates": [],
        "meta": {
            "created": "2025-01-01T00:00:00Z",
            "updated": "2025-01-01T00:00:00Z",
            "confidenceScore": 0.9,
            "difficulty": "Easy",
        },
    }
    if notes is not None:
        rec["aiGenerationNotes"] = notes
    return rec


def make_guide(**kw: Any) -> Guide:
    return Guide.model_validate(make_guide_dict(**kw))


def make_draft(**kw: Any) -> DraftGuide:
    return DraftGuide.model_validate(make_guide_dict(**kw))


def make_candidate(
    title: str = "How to fix printer offline on Windows 11",
    body: str = "Open Settings, go to Printers and scanners, and remove the device. " * 5,
    url: str = "https://superuser.com/questions/1",
) -> SearchCandidate:
    return SearchCandidate(title=title, body_excerpt=body, source_url=url)


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# ============================================================================
# FAKES
# ============================================================================

class FakeProvider:
    """SearchProvider returning canned results per call, recording queries."""

    def __init__(self, results: Optional[List[SearchCandidate]] = None):
        self.results = list(results or [])
        self.queries: List[str] = []

    def search(self, query: str) -> List[SearchCandidate]:
        self.queries.append(query)
        return list(self.results)


class FakeGenerator:
    """
    Stand-in for GuideGenerator.

    `drafts` maps candidate source_url -> DraftGuide (or None to simulate a
    generation failure). Unknown URLs produce a unique draft from the title.
    """

    def __init__(self, drafts: Optional[Dict[str, Optional[DraftGuide]]] = None):
        self.drafts = drafts or {}
        self.calls: List[SearchCandidate] = []
        self.feedback: List[str] = []

    def generate(self, candidate: SearchCandidate, feedback_context: str = "") -> Optional[DraftGuide]:
        self.calls.append(candidate)
        self.feedback.append(feedback_context)
        if candidate.source_url in self.drafts:
            return self.drafts[candidate.source_url]
        n = len(self.calls)
        return make_draft(
            guide_id=f"draft-{n}",
            title=f"{candidate.title} {n}",
            keywords=[f"kw{n}a", f"kw{n}b"],
        )


class FakeFetcher:
    """PageFetcher serving HTML from a dict; unknown URLs raise."""

    def __init__(self, pages: Dict[str, str]):
        self.pages = pages
        self.fetched: List[str] = []

    def fetch(self, url: str) -> str:
        self.fetched.append(url)
        for prefix, html in self.pages.items():
            if url.startswith(prefix):
                return html
        raise TimeoutError(f"navigation timeout: {url}")


@pytest.fixture
def store_paths(tmp_path: Path) -> Dict[str, Path]:
    return {
        "guides": tmp_path / "data" / "guides.json",
        "pending": tmp_path / "data" / "pending_guides.json",
    }
