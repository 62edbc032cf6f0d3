# techsteps/models/search_class.py
"""
SEARCH DATA MODELS

Shapes passed between the search providers, the content extractor and the
guide generator. Nothing here is persisted.

Used by:
    - techsteps/services/search.py
    - techsteps/services/extractor.py
    - techsteps/services/generator.py
    - techsteps/services/discovery.py
"""

from __future__ import annotations

from pydantic import BaseModel


class SearchCandidate(BaseModel):
    """
    One piece of source material for the generator.

    Primary search fills body_excerpt straight from the API; on the
    fallback path it comes from ContentExtractor.
    """
    title: str
    body_excerpt: str = ""
    source_url: str


class ExtractedPage(BaseModel):
    """Result of ContentExtractor.extract() for a single URL."""
    title: str
    body_excerpt: str
