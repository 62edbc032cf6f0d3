# techsteps/services/dedup.py
"""
Draft deduplication.

A draft is a duplicate of an existing guide when either
  - its title covers more than 70% of the significant words of that guide's
    title (word_overlap(draft_title, existing_title) > 0.7), or
  - at least 3 of its keywords equal (after normalization) keywords of that
    guide.

The first existing guide that trips either rule wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from techsteps.models.guide_class import Guide
from techsteps.utils.text_utils import normalize, word_overlap

TITLE_SIMILARITY_THRESHOLD = 0.7
MIN_COMMON_KEYWORDS = 3

REASON_TITLE = "title match"
REASON_KEYWORDS = "keyword overlap"


@dataclass
class DuplicateMatch:
    existing_id: str
    existing_title: str
    reason: str
    title_similarity: float = 0.0
    common_keywords: List[str] = field(default_factory=list)


def common_keywords(candidate: Sequence[str], existing: Sequence[str]) -> List[str]:
    existing_norm = {normalize(k) for k in existing or []}
    return [k for k in candidate or [] if normalize(k) in existing_norm]


def find_duplicate(
    title: str,
    keywords: Sequence[str],
    corpus: Iterable[Guide],
) -> Optional[DuplicateMatch]:
    for existing in corpus:
        sim = word_overlap(title, existing.title)
        if sim > TITLE_SIMILARITY_THRESHOLD:
            return DuplicateMatch(existing.id, existing.title, REASON_TITLE, title_similarity=sim)

        common = common_keywords(keywords, existing.keywords)
        if len(common) >= MIN_COMMON_KEYWORDS:
            return DuplicateMatch(
                existing.id,
                existing.title,
                REASON_KEYWORDS,
                title_similarity=sim,
                common_keywords=common,
            )
    return None


def is_duplicate(title: str, keywords: Sequence[str], corpus: Iterable[Guide]) -> bool:
    return find_duplicate(title, keywords, corpus) is not None
