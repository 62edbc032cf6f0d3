# techsteps/core/errors.py
"""
Error kinds raised inside the discovery pipeline.

None of these are fatal to a cycle: the orchestrator catches them per
candidate, logs them and bumps the matching counter in the CycleReport.
"""

from __future__ import annotations


class TechStepsError(Exception):
    """Base class for every error raised by this package."""


class SearchFailure(TechStepsError):
    """Search provider error, bad response or timeout."""


class ExtractionFailure(TechStepsError):
    """Page unreachable or too little text to be useful."""


class SafetyRejection(TechStepsError):
    """
    Candidate or draft contains a denylisted term.

    Only the field name is kept; the content itself is never logged.
    """

    def __init__(self, field: str):
        super().__init__(f"unsafe content in {field}")
        self.field = field


class GenerationFailure(TechStepsError):
    """LLM call failed or returned something that does not fit the schema."""


class DuplicateRejection(TechStepsError):
    def __init__(self, reason: str, existing_title: str):
        super().__init__(f"duplicate ({reason}) of {existing_title!r}")
        self.reason = reason
        self.existing_title = existing_title


class StoreError(TechStepsError):
    """A persisted store could not be read or written."""
