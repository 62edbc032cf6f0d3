# techsteps/api/safety_routes.py

"""
SAFETY ROUTER

Thin API layer over the denylist check, so the guide editor can warn a
reviewer before publishing:

    - Accepts a title and/or body.
    - Returns a SafetyVerdict (safe + which field failed).

Same check the discovery pipeline runs; no LLM calls, no writes.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from techsteps.models.safety_class import SafetyVerdict
from techsteps.services.safety import check_text

router = APIRouter(
    prefix="/api/v1/safety",
    tags=["safety"],
)


class SafetyRequest(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None


class SafetyResponse(BaseModel):
    ok: bool
    verdict: SafetyVerdict


@router.post("/check", response_model=SafetyResponse)
def check_safety(req: SafetyRequest) -> SafetyResponse:
    return SafetyResponse(ok=True, verdict=check_text(req.title, req.body))
