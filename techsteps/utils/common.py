# techsteps/utils/common.py

"""
 - Generic helpers shared across the package:
 - JSON file read/write, timestamps, and turning
 - pydantic models into plain JSON-able data.

"""

from __future__ import annotations

from typing import Any, List
from pathlib import Path
from datetime import datetime, timezone
import json
import logging

log = logging.getLogger(__name__)


def now_iso() -> str:
    """UTC timestamp in ISO-8601 with a trailing Z, used for guide meta."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def jsonable(o: Any) -> Any:
    """
    Recursively convert pydantic models, paths and datetimes into
    JSON-serializable primitives. Guides are dumped with their camelCase keys.
    """
    if o is None or isinstance(o, (bool, int, float, str)):
        return o

    if hasattr(o, "model_dump"):
        return jsonable(o.model_dump(by_alias=True, exclude_none=True))

    if isinstance(o, Path):
        return str(o)

    if isinstance(o, datetime):
        return o.isoformat()

    if isinstance(o, dict):
        return {str(k): jsonable(v) for k, v in o.items()}
    if isinstance(o, (list, tuple, set)):
        return [jsonable(v) for v in o]

    return str(o)


def read_json_list(path: Path) -> List[Any]:
    """
    Strict read of a JSON array. A missing file is [].

    Raises OSError when the file cannot be read and ValueError when it is
    not valid UTF-8 JSON or does not hold an array.
    """
    if not path.exists():
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} does not hold a JSON array")
    return data


def load_json_list(path: Path) -> List[Any]:
    """
    Lenient read for callers that only consume the data.

    Missing, unreadable, corrupt or non-list files all come back as [];
    the stores are optional inputs and must never take the process down.
    Never write the result back over path: use read_json_list for that.
    """
    try:
        return read_json_list(path)
    except (OSError, ValueError) as e:
        log.warning("could not read %s (%s: %s); treating as empty", path, type(e).__name__, e)
        return []


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_write_json(path: Path, obj: Any) -> None:
    """
    Write JSON via a temp file + rename so a crash mid-write never leaves
    a truncated store behind.
    """
    ensure_dir(path.parent)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(jsonable(obj), ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)
