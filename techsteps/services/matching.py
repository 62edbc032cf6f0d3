# techsteps/services/matching.py
"""
GUIDE MATCHING

Ranks the approved corpus against a user's free-text problem description.
Used by the chat front end to reuse an existing guide instead of generating
a new answer.

Scoring per guide (all sub-scores in [0, 1] before weighting):

    title   = word_overlap(query, guide.title)              * 0.4
    desc    = word_overlap(query, guide.problemDescription) * 0.3
    keyword = keyword_score(query, guide.keywords)          * 0.3
    total   = title + desc + keyword

Read path only: nothing here writes to a store.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence
import logging
import math

from techsteps.models.guide_class import Guide, MatchResult
from techsteps.services.dedup import is_duplicate as _is_duplicate
from techsteps.utils.text_utils import keyword_score, word_overlap

log = logging.getLogger(__name__)

TITLE_WEIGHT = 0.4
DESCRIPTION_WEIGHT = 0.3
KEYWORD_WEIGHT = 0.3

# Per-component thresholds (on weighted scores) used to explain a best match.
TITLE_REASON_MIN = 0.2
DESCRIPTION_REASON_MIN = 0.15
KEYWORD_REASON_MIN = 0.15


class GuideScore(NamedTuple):
    title: float
    description: float
    keyword: float
    total: float


def score_guide(query: str, guide: Guide) -> GuideScore:
    t = word_overlap(query, guide.title) * TITLE_WEIGHT
    d = word_overlap(query, guide.problem_description) * DESCRIPTION_WEIGHT
    k = keyword_score(query, guide.keywords) * KEYWORD_WEIGHT
    return GuideScore(t, d, k, t + d + k)


def _explain(s: GuideScore) -> str:
    reasons: List[str] = []
    if s.title > TITLE_REASON_MIN:
        reasons.append("title match")
    if s.description > DESCRIPTION_REASON_MIN:
        reasons.append("description match")
    if s.keyword > KEYWORD_REASON_MIN:
        reasons.append("keyword match")
    return ", ".join(reasons) or "general match"


def _percent(score: float) -> int:
    # half-up, the way the front end rounds
    return math.floor(score * 100 + 0.5)


class GuideMatcher:
    """
    Matcher over an explicitly supplied corpus.

    Build a new one when the corpus changes; it keeps no global state.
    """

    def __init__(self, guides: Sequence[Guide]):
        self._guides: List[Guide] = list(guides)

    def _scored(self, query: str, min_score: float) -> List[tuple[Guide, GuideScore]]:
        hits = []
        for guide in self._guides:
            s = score_guide(query, guide)
            if s.total >= min_score:
                hits.append((guide, s))
        # list.sort is stable: equal totals keep corpus order
        hits.sort(key=lambda h: h[1].total, reverse=True)
        return hits

    def find_best_match(self, query: str, min_score: float = 0.4) -> Optional[MatchResult]:
        hits = self._scored(query, min_score)
        if not hits:
            log.debug("no guide reached %.2f for %r", min_score, query)
            return None
        guide, s = hits[0]
        return MatchResult(guide=guide, score=s.total, match_reason=_explain(s))

    def find_matches(
        self,
        query: str,
        limit: int = 5,
        min_score: float = 0.3,
    ) -> List[MatchResult]:
        if limit <= 0:
            return []
        return [
            MatchResult(guide=g, score=s.total, match_reason=f"{_percent(s.total)}% match")
            for g, s in self._scored(query, min_score)[:limit]
        ]

    def is_duplicate(self, title: str, keywords: Sequence[str]) -> bool:
        return _is_duplicate(title, keywords, self._guides)

    def all_guides(self) -> List[Guide]:
        return list(self._guides)

    def by_category(self, category: str) -> List[Guide]:
        want = (category or "").lower()
        return [g for g in self._guides if g.category.lower() == want]
