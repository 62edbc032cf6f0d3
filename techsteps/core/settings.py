# techsteps/core/settings.py
"""
Application settings.

Loaded once from the environment (and an optional .env file). Everything
that talks to the outside world (stores, search, LLM, API) reads its knobs
from here so that tests can build a Settings(...) directly.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- stores ---
    guides_file: Path = Path("./data/guides.json")
    pending_file: Path = Path("./data/pending_guides.json")

    # --- primary search (Tavily) ---
    tavily_api_key: Optional[str] = None
    tavily_endpoint: str = "https://api.tavily.com/search"
    search_timeout_seconds: float = 20.0

    # --- fallback search / extraction (headless browser) ---
    fallback_search_url: str = "https://html.duckduckgo.com/html/"
    navigation_timeout_ms: int = 10_000

    # --- generation (Mistral chat completions) ---
    mistral_api_key: Optional[str] = None
    mistral_endpoint: str = "https://api.mistral.ai/v1/chat/completions"
    mistral_model: str = "mistral-small-latest"
    llm_timeout_seconds: float = 60.0

    # --- discovery cycle ---
    batch_size: int = Field(5, ge=1)
    query_delay_seconds: float = 1.0
    continuous_interval_seconds: float = 3600.0

    # --- API ---
    api_key: Optional[str] = None
    cors_allow_origins: List[str] = Field(default_factory=list)

    log_level: str = "INFO"
    schema_version: str = "v1"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
