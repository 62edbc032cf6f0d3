# techsteps/models/llm_class.py
"""
LLM configuration and output schema.

Shared between:
  - utils.llm_utils (HTTP call to the chat-completions endpoint)
  - services.generator (prompting + validation)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Category = Literal["wifi", "windows", "ios", "android", "browser", "app-error", "robotics"]


@dataclass
class LLMCfg:
    """
    Chat-completions configuration. api_key=None turns every call into a no-op.
    """
    endpoint: str
    model_id: str
    api_key: Optional[str] = None
    timeout: float = 60.0
    temperature: float = 0.3


class GeneratedStep(BaseModel):
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    content: str = ""


class GeneratedAlternate(BaseModel):
    title: str = Field(..., min_length=1)
    type: Literal["Community Workaround", "Official"] = "Community Workaround"
    steps: List[GeneratedStep] = Field(default_factory=list)


class GeneratedGuide(BaseModel):
    """
    The JSON object the model is asked to return.

    Anything that does not validate is dropped by the generator.
    """
    title: str = Field(..., min_length=1)
    problemDescription: str = Field(..., min_length=1)
    category: Category
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    keywords: List[str] = Field(default_factory=list)
    steps: List[GeneratedStep] = Field(..., min_length=1)
    alternates: List[GeneratedAlternate] = Field(default_factory=list)

    @field_validator("title", "problemDescription")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _lower_category(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("difficulty", mode="before")
    @classmethod
    def _default_difficulty(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "Medium"
        return v.strip().capitalize() if isinstance(v, str) else v

    @field_validator("keywords")
    @classmethod
    def _clean_keywords(cls, v: List[str]) -> List[str]:
        return [k.strip() for k in v if isinstance(k, str) and k.strip()]
