# techsteps/models/guide_class.py
"""
GUIDE DATA MODELS

Pydantic models for troubleshooting guides as they live on disk:

  1) data/guides.json          -> list[Guide]       (approved corpus)
  2) data/pending_guides.json  -> list[DraftGuide]  (awaiting human review)

FILE SCHEMA OVERVIEW
--------------------

  {
    "id": "wifi-no-internet",
    "title": "Fix Wi-Fi No Internet",
    "problemDescription": "Connected to Wi-Fi but pages do not load.",
    "keywords": ["wifi", "internet", "connection"],
    "category": "wifi",
    "steps": [
      {"id": "step-1", "title": "Restart router", "content": "..."}
    ],
    "alternates": [
      {"title": "Method 2: Forget network", "type": "Community Workaround",
       "steps": [...]}
    ],
    "meta": {
      "created": "2025-11-30T17:18:00Z",
      "updated": "2025-11-30T17:18:00Z",
      "sourceUrl": "https://superuser.com/...",
      "confidenceScore": 0.85,
      "priorityScore": 0.8,
      "difficulty": "Easy"
    },
    "aiGenerationNotes": "Steps were too long"     # drafts only
  }

Keys stay camelCase on disk (the web front end reads the same files);
Python attributes are snake_case and models are dumped with by_alias=True.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Difficulty = Literal["Easy", "Medium", "Hard"]
AlternateType = Literal["Community Workaround", "Official"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Step(_CamelModel):
    id: str = ""
    title: str
    content: str = ""
    image: Optional[str] = None
    # Annotation geometry belongs to the editor UI; kept opaque here.
    annotations: Optional[List[Dict[str, Any]]] = None


class AlternateSolution(_CamelModel):
    title: str
    type: AlternateType = "Community Workaround"
    steps: List[Step] = Field(default_factory=list)


class GuideMeta(_CamelModel):
    created: str
    updated: str
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    confidence_score: float = Field(..., ge=0.0, le=1.0, alias="confidenceScore")
    priority_score: Optional[float] = Field(None, alias="priorityScore")
    difficulty: Difficulty = "Medium"


class Guide(_CamelModel):
    id: str
    title: str
    problem_description: str = Field("", alias="problemDescription")
    keywords: List[str] = Field(default_factory=list)
    category: str = ""
    steps: List[Step] = Field(default_factory=list)
    alternates: List[AlternateSolution] = Field(default_factory=list)
    meta: GuideMeta

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class DraftGuide(Guide):
    """
    A generated guide that has not been reviewed yet.

    aiGenerationNotes is written by the human reviewer and read back into
    later generation prompts.
    """
    ai_generation_notes: Optional[str] = Field(None, alias="aiGenerationNotes")


class MatchResult(BaseModel):
    """Ephemeral, one per (query, guide) pair that cleared the threshold."""
    guide: Guide
    score: float
    match_reason: str
