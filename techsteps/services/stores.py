# techsteps/services/stores.py
"""
STORE SERVICE LAYER

File-backed repositories for the two guide collections:

    - GuideStore    data/guides.json          approved corpus, read-only here
    - PendingStore  data/pending_guides.json  drafts awaiting human review

Design rules:
    • Stores are passed explicitly to the matcher and the orchestrator;
      there is no module-level cache.
    • A missing or corrupt file loads as an empty collection, but
      PendingStore.append() refuses to write over a corrupt file.
    • Invalid records are skipped one by one, not the whole file.
    • PendingStore.append() is a read-merge-write of the whole file. An
      external editor writing the same file at the same moment can lose
      updates; there is no locking.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Type, TypeVar
import logging

from pydantic import ValidationError

from techsteps.core.errors import StoreError
from techsteps.models.guide_class import DraftGuide, Guide
from techsteps.utils.common import load_json_list, read_json_list, safe_write_json

log = logging.getLogger(__name__)

G = TypeVar("G", bound=Guide)

FEEDBACK_LIMIT = 10


def _parse_records(raw: Iterable[Any], model: Type[G], source: Path) -> List[G]:
    out: List[G] = []
    for idx, rec in enumerate(raw):
        if not isinstance(rec, dict):
            log.warning("%s[%d]: not an object, skipped", source.name, idx)
            continue
        try:
            out.append(model.model_validate(rec))
        except ValidationError as e:
            log.warning("%s[%d]: invalid guide skipped (%d errors)", source.name, idx, e.error_count())
    return out


class GuideStore:
    """Approved corpus. The pipeline never writes to it."""

    model: Type[Guide] = Guide

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Guide]:
        return _parse_records(load_json_list(self.path), self.model, self.path)

    def raw(self) -> List[Dict[str, Any]]:
        return [r for r in load_json_list(self.path) if isinstance(r, dict)]


class PendingStore(GuideStore):
    """Drafts waiting for a human reviewer."""

    model = DraftGuide

    def load(self) -> List[DraftGuide]:  # type: ignore[override]
        return _parse_records(load_json_list(self.path), DraftGuide, self.path)

    def append(self, drafts: Sequence[DraftGuide]) -> int:
        """
        Re-read the current file, add drafts, write everything back.

        Existing records are written back untouched (even ones that do not
        validate) so a reviewer's in-progress edits are not dropped.

        Raises StoreError, and leaves the file alone, when the current file
        cannot be parsed or the new one cannot be written.
        """
        if not drafts:
            return 0
        try:
            current = read_json_list(self.path)
        except (OSError, ValueError) as e:
            raise StoreError(
                f"pending store {self.path} is unreadable ({type(e).__name__}: {e}); not overwriting it"
            ) from e
        current.extend(d.to_json() for d in drafts)
        try:
            safe_write_json(self.path, current)
        except OSError as e:
            raise StoreError(f"could not write pending store {self.path}: {e}") from e
        log.info("pending store %s: +%d drafts (%d total)", self.path, len(drafts), len(current))
        return len(drafts)


# ---------------------------------------------------------------------------
# Reviewer feedback harvesting
# ---------------------------------------------------------------------------

def collect_feedback_notes(
    stores: Sequence[GuideStore],
    limit: int = FEEDBACK_LIMIT,
) -> List[str]:
    """
    Scan every store (in order) for non-empty aiGenerationNotes and keep
    the last `limit`, rendered the way the generator prompt expects.

    Works on raw records so that notes on published guides (which are not
    DraftGuides) are found too.
    """
    notes: List[str] = []
    for store in stores:
        for rec in store.raw():
            note = rec.get("aiGenerationNotes")
            if isinstance(note, str) and note.strip():
                notes.append(f'- From human editor on "{rec.get("title", "")}": "{note}"')
    if limit <= 0:
        return []
    return notes[-limit:]
