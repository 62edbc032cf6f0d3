# techsteps/utils/text_utils.py
"""
Text normalization and similarity scoring.

These two scores are the shared primitive behind guide matching and
draft deduplication.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Set

# Keep letters, digits and whitespace only (\w also admits "_").
_STRIP_RE = re.compile(r"[^\w\s]|_", flags=re.UNICODE)
_WS_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """
    Lowercase, drop punctuation, collapse whitespace, trim.

    "Wi-Fi  Not Working!" -> "wifi not working"
    """
    if not text:
        return ""
    out = _STRIP_RE.sub("", str(text).lower())
    return _WS_RE.sub(" ", out).strip()


def tokens(text: Optional[str]) -> Set[str]:
    norm = normalize(text)
    return set(norm.split(" ")) if norm else set()


def word_overlap(query: Optional[str], text: Optional[str]) -> float:
    """
    Fraction of the query's significant words (len > 2) found in text.

    Query-relative, not Jaccard: word_overlap(a, b) != word_overlap(b, a).
    """
    q = {w for w in tokens(query) if len(w) > 2}
    if not q:
        return 0.0
    t = tokens(text)
    return len(q & t) / len(q)


def keyword_score(query: Optional[str], keywords: Iterable[str]) -> float:
    """
    Fraction of keywords that appear (as substrings) in the normalized query.
    """
    kws = list(keywords or [])
    if not kws:
        return 0.0
    nq = normalize(query)
    matches = 0
    for kw in kws:
        nk = normalize(kw)
        # a keyword that normalizes to "" (e.g. "!!!") never counts as present
        if nk and nk in nq:
            matches += 1
    return matches / len(kws)
