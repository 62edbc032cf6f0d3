# techsteps/models/safety_class.py

"""
SAFETY DATA MODELS

Typed result of the denylist check, shared by the service layer and the
/api/v1/safety router.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class SafetyVerdict(BaseModel):
    """
    safe:  False as soon as any checked field hits the denylist.
    field: which field tripped the check ("title", "body", ...).
           The matched term is not reported.
    """
    safe: bool = True
    field: Optional[str] = None
