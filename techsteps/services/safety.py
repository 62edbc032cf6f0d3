# techsteps/services/safety.py

"""
SAFETY SERVICE LAYER

Purpose:
- Keep unsafe or illegal topics out of the generated guide corpus.
- Plain case-insensitive substring test against a fixed denylist. "leak"
  also rejects "memory leak" threads.

How it's used:
- is_safe(text)                 → bool, the primitive.
- check_candidate(candidate)    → SafetyVerdict for search material (title, body)
                                  BEFORE it is sent to the generator.
- check_draft(draft)            → SafetyVerdict for generator output (title,
                                  problemDescription). Generator output is
                                  not trusted just because its input was clean.

Rejections are logged by field name only, never with the content.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from techsteps.models.guide_class import Guide
from techsteps.models.safety_class import SafetyVerdict
from techsteps.models.search_class import SearchCandidate


# ============================================================================
# DENYLIST
# ============================================================================

DENYLIST: Tuple[str, ...] = (
    "porn", "xxx", "sex", "nude", "nsfw", "drug", "gamble", "casino", "dating",
    "hack", "crack", "pirat", "torrent", "warez", "bypass", "activator", "kms",
    "onlyfans", "leak",
)


def is_safe(text: Optional[str], denylist: Iterable[str] = DENYLIST) -> bool:
    """False if any denylisted term appears anywhere in text (case-insensitive)."""
    lower = (text or "").lower()
    return not any(term in lower for term in denylist)


def _check_fields(*fields: Tuple[str, Optional[str]]) -> SafetyVerdict:
    for name, value in fields:
        if not is_safe(value):
            return SafetyVerdict(safe=False, field=name)
    return SafetyVerdict(safe=True)


# ============================================================================
# PIPELINE CHECKS
# ============================================================================

def check_candidate(candidate: SearchCandidate) -> SafetyVerdict:
    return _check_fields(
        ("title", candidate.title),
        ("body", candidate.body_excerpt),
    )


def check_draft(draft: Guide) -> SafetyVerdict:
    return _check_fields(
        ("title", draft.title),
        ("problemDescription", draft.problem_description),
    )


def check_text(title: Optional[str] = None, body: Optional[str] = None) -> SafetyVerdict:
    """Ad-hoc check used by the /api/v1/safety router."""
    return _check_fields(("title", title), ("body", body))
