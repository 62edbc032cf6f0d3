# techsteps/api/orchestrator.py

from __future__ import annotations

from typing import Any, Dict

import threading
import time

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from techsteps.core.settings import Settings, get_settings
from techsteps.services.discovery import build_orchestrator
from techsteps.services.stores import PendingStore
from techsteps.utils.llm_utils import get_llm_last_error

router = APIRouter(prefix="/api/v1/discovery", tags=["discovery"])

# One cycle at a time per process; cycles share the pending read-merge-write.
_CYCLE_LOCK = threading.Lock()


# ---------------------------------------------------------------------------
# HEALTH / STATUS
# ---------------------------------------------------------------------------

@router.get("/ping")
def discovery_ping(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """
    Readiness check plus a quick view of what a cycle would be able to do.
    """
    body: Dict[str, Any] = {
        "ok": True,
        "service": "discovery",
        "version": settings.schema_version,
        "timestamp": time.time(),
        "primary_search": bool(settings.tavily_api_key),
        "generation": bool(settings.mistral_api_key),
        "pending_count": len(PendingStore(settings.pending_file).raw()),
        "llm_last_error": get_llm_last_error(),
        "cycle_running": _CYCLE_LOCK.locked(),
    }
    return JSONResponse(content=jsonable_encoder(body))


# ---------------------------------------------------------------------------
# POST /run – one discovery cycle, synchronously
# ---------------------------------------------------------------------------

@router.post("/run")
def run_discovery_cycle(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """
    Run exactly one cycle and return its report.

    Declared sync so FastAPI runs it in the threadpool; a cycle can take
    minutes (search + generation per candidate). A request that arrives
    while another cycle is running gets 409 instead of a second cycle.
    """
    if not _CYCLE_LOCK.acquire(blocking=False):
        raise HTTPException(status_code=409, detail="a discovery cycle is already running")
    try:
        report = build_orchestrator(settings).run_cycle()
    finally:
        _CYCLE_LOCK.release()
    return JSONResponse(content=jsonable_encoder({"ok": True, "report": report.summary()}))
