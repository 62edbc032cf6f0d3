# techsteps/api/deps.py

"""
Shared FastAPI dependencies: API-key gate and per-request store access.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException

from techsteps.core.settings import Settings, get_settings
from techsteps.services.matching import GuideMatcher
from techsteps.services.stores import GuideStore


def require_api_key(
    x_api_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Reject the call unless it carries the configured key.
    No key configured → open API (local development).
    """
    want = settings.api_key
    if want and (not x_api_key or x_api_key != want):
        raise HTTPException(status_code=401, detail="invalid api key")


def get_matcher(settings: Settings = Depends(get_settings)) -> GuideMatcher:
    """Fresh matcher per request so corpus edits are picked up without a restart."""
    return GuideMatcher(GuideStore(settings.guides_file).load())
