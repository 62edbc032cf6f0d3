# techsteps/api/guide_routes.py

"""
GUIDE MATCHING ROUTER

Read-only endpoints over the approved corpus, used by the chat front end to
reuse an existing guide before generating a fresh answer.

    POST /api/v1/guides/match               best match or null
    POST /api/v1/guides/matches             ranked matches
    GET  /api/v1/guides/category/{name}     all guides in a category
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from techsteps.api.deps import get_matcher
from techsteps.services.matching import GuideMatcher
from techsteps.utils.common import jsonable

router = APIRouter(prefix="/api/v1/guides", tags=["guides"])


# ---------------------------------------------------------------------------
# REQUEST / RESPONSE MODELS
# ---------------------------------------------------------------------------

class MatchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="User's problem description")
    min_score: Optional[float] = Field(None, ge=0.0, le=1.0)
    limit: int = Field(5, ge=1, le=50)


class MatchItem(BaseModel):
    guide: Dict[str, Any]
    score: float
    match_reason: str


class BestMatchResponse(BaseModel):
    ok: bool = True
    query: str
    match: Optional[MatchItem] = None


class MatchesResponse(BaseModel):
    ok: bool = True
    query: str
    matches: List[MatchItem] = []


def _item(res) -> MatchItem:
    return MatchItem(guide=jsonable(res.guide), score=res.score, match_reason=res.match_reason)


# ---------------------------------------------------------------------------
# ROUTES
# ---------------------------------------------------------------------------

@router.post("/match", response_model=BestMatchResponse)
def best_match(req: MatchRequest, matcher: GuideMatcher = Depends(get_matcher)) -> BestMatchResponse:
    min_score = 0.4 if req.min_score is None else req.min_score
    res = matcher.find_best_match(req.query, min_score=min_score)
    return BestMatchResponse(query=req.query, match=_item(res) if res else None)


@router.post("/matches", response_model=MatchesResponse)
def ranked_matches(req: MatchRequest, matcher: GuideMatcher = Depends(get_matcher)) -> MatchesResponse:
    min_score = 0.3 if req.min_score is None else req.min_score
    results = matcher.find_matches(req.query, limit=req.limit, min_score=min_score)
    return MatchesResponse(query=req.query, matches=[_item(r) for r in results])


@router.get("/category/{category}")
def guides_in_category(category: str, matcher: GuideMatcher = Depends(get_matcher)) -> Dict[str, Any]:
    guides = matcher.by_category(category)
    return {"ok": True, "category": category, "count": len(guides), "guides": jsonable(guides)}
