# techsteps/services/generator.py
"""
Guide generation.

Turns one SearchCandidate into a DraftGuide by asking the LLM for a JSON
object in a fixed schema, then validating it (models.llm_class.GeneratedGuide).

All LLM calls for the discovery pipeline flow through GuideGenerator so that
prompt changes and model swaps happen in one place.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence
import logging
import uuid

import httpx
from pydantic import ValidationError

from techsteps.core.errors import GenerationFailure
from techsteps.models.guide_class import (
    AlternateSolution,
    DraftGuide,
    GuideMeta,
    Step,
)
from techsteps.models.llm_class import GeneratedGuide, GeneratedStep, LLMCfg
from techsteps.models.search_class import SearchCandidate
from techsteps.utils.common import now_iso
from techsteps.utils.llm_utils import llm_chat_json

log = logging.getLogger(__name__)

MAX_SOURCE_CHARS = 5000
CONFIDENCE_SCORE = 0.85
PRIORITY_SCORE = 0.8

SYSTEM_PROMPT = """
You are "TechSteps Expert", an editor of short consumer tech troubleshooting guides.
Read the provided content (web page, video description or forum thread) and
return ONE JSON object describing a troubleshooting guide.

Schema:
{
  "title": "Clear, short title (e.g. Fix Wi-Fi No Internet)",
  "problemDescription": "1-2 sentence summary of the issue.",
  "category": "wifi" | "windows" | "ios" | "android" | "browser" | "app-error" | "robotics",
  "difficulty": "Easy" | "Medium" | "Hard",
  "keywords": ["wifi", "internet", "connection"],
  "steps": [
    { "title": "Step title", "content": "Actionable instruction." }
  ],
  "alternates": [
    {
      "title": "Method 2: ...",
      "type": "Community Workaround",
      "steps": [ { "title": "...", "content": "..." } ]
    }
  ]
}

Rules:
1. Use the BEST solution in the content for "steps".
2. Put other viable solutions in "alternates".
3. Pick "difficulty" from how complex the steps are.
4. Reply with the JSON object only.
"""

FEEDBACK_HEADER = "CRITICAL - INCORPORATE THE FOLLOWING HUMAN FEEDBACK FROM PREVIOUS RUNS:"


def render_feedback_context(notes: Sequence[str]) -> str:
    """Notes come pre-rendered from stores.collect_feedback_notes()."""
    if not notes:
        return ""
    return "\n\n" + FEEDBACK_HEADER + "\n" + "\n".join(notes) + "\n"


def build_messages(candidate: SearchCandidate, feedback_context: str) -> List[Dict[str, str]]:
    user = (
        f"SOURCE: {candidate.title}\n"
        f"URL: {candidate.source_url}\n"
        f"CONTENT (Summary/Excerpt):\n"
        f"{candidate.body_excerpt[:MAX_SOURCE_CHARS]}\n"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT + (feedback_context or "")},
        {"role": "user", "content": user},
    ]


def _steps(items: Sequence[GeneratedStep], prefix: str = "step") -> List[Step]:
    return [
        Step(id=s.id or f"{prefix}-{i}", title=s.title, content=s.content)
        for i, s in enumerate(items, start=1)
    ]


def to_draft(out: GeneratedGuide, source_url: str) -> DraftGuide:
    now = now_iso()
    return DraftGuide(
        id=f"draft-{uuid.uuid4().hex}",
        title=out.title,
        problem_description=out.problemDescription,
        keywords=out.keywords,
        category=out.category,
        steps=_steps(out.steps),
        alternates=[
            AlternateSolution(title=a.title, type=a.type, steps=_steps(a.steps, f"alt{n}-step"))
            for n, a in enumerate(out.alternates, start=1)
        ],
        meta=GuideMeta(
            created=now,
            updated=now,
            source_url=source_url,
            confidence_score=CONFIDENCE_SCORE,
            priority_score=PRIORITY_SCORE,
            difficulty=out.difficulty or "Medium",
        ),
    )


class GuideGenerator:
    """
    generate(candidate, feedback_context) -> DraftGuide | None

    Returns None (never raises) when the API key is missing, the call
    fails, or the reply does not fit the schema.
    """

    def __init__(
        self,
        cfg: LLMCfg,
        client: Optional[httpx.Client] = None,
        chat: Optional[Callable[..., dict]] = None,
    ):
        self.cfg = cfg
        self._client = client
        self._chat = chat or llm_chat_json

    @property
    def enabled(self) -> bool:
        return bool(self.cfg.api_key)

    def _call(self, candidate: SearchCandidate, feedback_context: str) -> GeneratedGuide:
        raw = self._chat(build_messages(candidate, feedback_context), self.cfg, client=self._client)
        try:
            return GeneratedGuide.model_validate(raw)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise GenerationFailure(f"schema violation in {', '.join(fields)}") from e

    def generate(self, candidate: SearchCandidate, feedback_context: str = "") -> Optional[DraftGuide]:
        if not self.enabled:
            return None
        try:
            out = self._call(candidate, feedback_context)
        except GenerationFailure as e:
            log.warning("generation failed for %s: %s", candidate.source_url, e)
            return None
        draft = to_draft(out, candidate.source_url)
        log.info("generated draft %s (%r)", draft.id, draft.title)
        return draft
