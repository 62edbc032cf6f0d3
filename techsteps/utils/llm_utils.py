# techsteps/utils/llm_utils.py
"""
Shared chat-completions helper.

Responsibilities:
  - Build an LLMCfg from settings
  - Provide llm_chat_json(messages, ...) against a Mistral-compatible
    /v1/chat/completions endpoint in JSON-object mode
  - Expose last_error for diagnostics

Prompting and schema validation live in services.generator.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import json
import logging

import httpx

from techsteps.core.errors import GenerationFailure
from techsteps.core.settings import Settings
from techsteps.models.llm_class import LLMCfg

logger = logging.getLogger(__name__)

_LAST_ERROR: Optional[str] = None


def get_llm_last_error() -> Optional[str]:
    """Last call error message (if any), for health/debug endpoints."""
    return _LAST_ERROR


def build_cfg_from_settings(cfg: Settings) -> LLMCfg:
    return LLMCfg(
        endpoint=cfg.mistral_endpoint,
        model_id=cfg.mistral_model,
        api_key=cfg.mistral_api_key,
        timeout=cfg.llm_timeout_seconds,
    )


def _extract_json_block(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse text as a JSON object; if that fails, try the outermost {...}
    (some models wrap JSON in prose or code fences despite JSON mode).
    """
    if not text:
        return None
    try:
        obj = json.loads(text)
        return obj if isinstance(obj, dict) else None
    except ValueError:
        pass
    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        try:
            obj = json.loads(text[start : end + 1])
            return obj if isinstance(obj, dict) else None
        except ValueError:
            return None
    return None


def llm_chat_json(
    messages: List[Dict[str, str]],
    cfg: LLMCfg,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """
    Send messages and return the assistant's JSON object.

    Raises GenerationFailure on HTTP errors, non-2xx status, or content
    that is not a JSON object.
    """
    global _LAST_ERROR

    body = {
        "model": cfg.model_id,
        "messages": messages,
        "temperature": cfg.temperature,
        "response_format": {"type": "json_object"},
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {cfg.api_key}",
    }

    try:
        if client is not None:
            resp = client.post(cfg.endpoint, json=body, headers=headers, timeout=cfg.timeout)
        else:
            with httpx.Client(timeout=cfg.timeout) as c:
                resp = c.post(cfg.endpoint, json=body, headers=headers)
    except httpx.HTTPError as e:
        _LAST_ERROR = f"{type(e).__name__}: {e}"
        raise GenerationFailure(_LAST_ERROR) from e

    if resp.status_code >= 400:
        _LAST_ERROR = f"HTTP {resp.status_code}"
        raise GenerationFailure(_LAST_ERROR)

    try:
        content = resp.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        _LAST_ERROR = f"unexpected response shape: {type(e).__name__}"
        raise GenerationFailure(_LAST_ERROR) from e

    obj = _extract_json_block(content if isinstance(content, str) else "")
    if obj is None:
        _LAST_ERROR = "assistant content is not a JSON object"
        raise GenerationFailure(_LAST_ERROR)

    logger.info("LLM chat: %s returned %d keys", cfg.model_id, len(obj))
    return obj
