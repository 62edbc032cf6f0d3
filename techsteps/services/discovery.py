# techsteps/services/discovery.py

"""
DISCOVERY ORCHESTRATOR

Grows the guide corpus by one cycle at a time:

    pick topic/source → search (primary, else fallback + extract)
      → safety check → generate → safety re-check → dedup → accept

All accepted drafts of a cycle are appended to the pending store in one
write at the end. Nothing in the per-candidate path can abort a cycle; every
drop is logged and counted in the CycleReport that run_cycle() returns.

States:
    idle → running → idle                                (run_cycle)
    idle → running → scheduled → running → …             (run_forever)

run_forever() only sleeps after run_cycle() has returned, so two cycles
never overlap however long one takes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections import deque
from typing import Callable, Deque, Iterator, List, Literal, Optional, Sequence, Tuple
import itertools
import logging
import random
import time

from techsteps.core.errors import (
    DuplicateRejection,
    GenerationFailure,
    SafetyRejection,
    StoreError,
)
from techsteps.core.settings import Settings
from techsteps.models.guide_class import DraftGuide, Guide
from techsteps.models.search_class import SearchCandidate
from techsteps.services.dedup import find_duplicate
from techsteps.services.generator import GuideGenerator, render_feedback_context
from techsteps.services.safety import check_candidate, check_draft
from techsteps.services.search import SearchProvider, build_providers, search_with_fallback
from techsteps.services.stores import GuideStore, PendingStore, collect_feedback_notes
from techsteps.utils.common import now_iso
from techsteps.utils.llm_utils import build_cfg_from_settings

log = logging.getLogger(__name__)

OrchestratorState = Literal["idle", "running", "scheduled"]

SEARCH_TOPICS: Tuple[str, ...] = (
    "iphone", "android", "windows 11", "macbook", "wifi", "printer", "bluetooth", "chrome",
    "samsung galaxy", "google pixel", "airpods", "smart tv", "roku", "alexa", "siri",
    "outlook", "gmail", "zoom", "teams", "discord", "whatsapp", "instagram",
    "usb not recognized", "screen flickering", "slow computer", "battery drain",
    "password reset", "two factor authentication", "notifications not working",
)

SEARCH_SOURCES: Tuple[str, ...] = (
    # forums
    "reddit.com", "quora.com",
    "discussions.apple.com", "answers.microsoft.com",
    # stackexchange
    "superuser.com", "askubuntu.com", "apple.stackexchange.com", "android.stackexchange.com",
    # tech sites
    "howtogeek.com", "lifehacker.com", "tomshardware.com", "makeuseof.com",
    "digitaltrends.com", "cnet.com", "techradar.com",
    # video descriptions
    "youtube.com",
)


def build_query(topic: str, source: str) -> str:
    return f"how to fix {topic} issue solved site:{source}"


# ---------------------------------------------------------------------------
# Topic selection strategies
# ---------------------------------------------------------------------------

class TopicPicker:
    def next(self) -> Tuple[str, str]:
        """Return (topic, source) for the next query."""
        raise NotImplementedError


class RandomTopicPicker(TopicPicker):
    def __init__(
        self,
        topics: Sequence[str] = SEARCH_TOPICS,
        sources: Sequence[str] = SEARCH_SOURCES,
        seed: Optional[int] = None,
    ):
        self.topics = list(topics)
        self.sources = list(sources)
        self._rng = random.Random(seed)

    def next(self) -> Tuple[str, str]:
        return self._rng.choice(self.topics), self._rng.choice(self.sources)


class SequenceTopicPicker(TopicPicker):
    """Deterministic picker; cycles through the given pairs forever."""

    def __init__(self, pairs: Sequence[Tuple[str, str]]):
        if not pairs:
            raise ValueError("SequenceTopicPicker needs at least one (topic, source) pair")
        self._it: Iterator[Tuple[str, str]] = itertools.cycle(list(pairs))

    def next(self) -> Tuple[str, str]:
        return next(self._it)


# ---------------------------------------------------------------------------
# Cycle report
# ---------------------------------------------------------------------------

@dataclass
class CycleReport:
    started_at: str
    finished_at: Optional[str] = None
    queries: List[str] = field(default_factory=list)
    candidates_seen: int = 0
    unsafe: int = 0
    generation_failed: int = 0
    duplicate: int = 0
    accepted: List[DraftGuide] = field(default_factory=list)
    persisted: bool = False

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    def summary(self) -> dict:
        return {
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "queries": list(self.queries),
            "candidates_seen": self.candidates_seen,
            "rejected": {
                "unsafe": self.unsafe,
                "generation_failed": self.generation_failed,
                "duplicate": self.duplicate,
            },
            "accepted": self.accepted_count,
            "accepted_titles": [d.title for d in self.accepted],
            "persisted": self.persisted,
        }


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class DiscoveryOrchestrator:
    def __init__(
        self,
        corpus: GuideStore,
        pending: PendingStore,
        primary: SearchProvider,
        fallback: SearchProvider,
        generator: GuideGenerator,
        picker: Optional[TopicPicker] = None,
        batch_size: int = 5,
        query_delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.corpus = corpus
        self.pending = pending
        self.primary = primary
        self.fallback = fallback
        self.generator = generator
        self.picker = picker or RandomTopicPicker()
        self.batch_size = max(1, int(batch_size))
        self.query_delay_seconds = query_delay_seconds
        self._sleep = sleep
        self.state: OrchestratorState = "idle"

    # -- per-candidate -------------------------------------------------------

    def _process_candidate(
        self,
        cand: SearchCandidate,
        feedback: str,
        reference: List[Guide],
        accepted: List[DraftGuide],
    ) -> DraftGuide:
        """
        Run one candidate through safety → generate → safety → dedup.

        Raises SafetyRejection, GenerationFailure or DuplicateRejection for
        a drop; run_cycle() counts those and moves on.
        """
        verdict = check_candidate(cand)
        if not verdict.safe:
            raise SafetyRejection(verdict.field or "candidate")

        draft = self.generator.generate(cand, feedback)
        if draft is None:
            raise GenerationFailure(f"no draft for {cand.source_url}")

        verdict = check_draft(draft)
        if not verdict.safe:
            raise SafetyRejection(verdict.field or "draft")

        dup = find_duplicate(draft.title, draft.keywords, [*reference, *accepted])
        if dup is not None:
            if dup.common_keywords:
                log.info("  duplicate (%s): %s", dup.reason, ", ".join(dup.common_keywords))
            else:
                log.info("  duplicate (%s): %r ~ %r", dup.reason, draft.title, dup.existing_title)
            raise DuplicateRejection(dup.reason, dup.existing_title)

        return draft

    def _try_candidate(
        self,
        cand: SearchCandidate,
        feedback: str,
        reference: List[Guide],
        report: CycleReport,
    ) -> None:
        report.candidates_seen += 1
        try:
            draft = self._process_candidate(cand, feedback, reference, report.accepted)
        except SafetyRejection as e:
            report.unsafe += 1
            log.info("  skipped unsafe content (%s) from %s", e.field, cand.source_url)
        except GenerationFailure as e:
            report.generation_failed += 1
            log.info("  generation dropped: %s", e)
        except DuplicateRejection:
            report.duplicate += 1
        else:
            log.info("  accepted: %r", draft.title)
            report.accepted.append(draft)

    # -- cycle ---------------------------------------------------------------

    def run_cycle(self) -> CycleReport:
        self.state = "running"
        report = CycleReport(started_at=now_iso())
        log.info("=== discovery cycle start %s ===", report.started_at)
        try:
            feedback = render_feedback_context(collect_feedback_notes([self.corpus, self.pending]))
            reference: List[Guide] = [*self.pending.load(), *self.corpus.load()]

            for n in range(self.batch_size):
                topic, source = self.picker.next()
                query = build_query(topic, source)
                report.queries.append(query)
                log.info("[query %d/%d] %r", n + 1, self.batch_size, query)

                candidates = search_with_fallback(query, self.primary, self.fallback)
                for cand in candidates:
                    self._try_candidate(cand, feedback, reference, report)

                if n < self.batch_size - 1 and self.query_delay_seconds > 0:
                    self._sleep(self.query_delay_seconds)

            if report.accepted:
                try:
                    self.pending.append(report.accepted)
                    report.persisted = True
                except StoreError as e:
                    log.error("%s", e)
        finally:
            report.finished_at = now_iso()
            self.state = "idle"

        log.info("=== discovery cycle complete: %d new drafts ===", report.accepted_count)
        return report

    def run_forever(
        self,
        interval_seconds: float,
        max_cycles: Optional[int] = None,
        keep_last: int = 10,
    ) -> List[CycleReport]:
        """
        Run a cycle, wait interval_seconds, repeat.

        max_cycles bounds the loop (tests); None runs until the process is
        stopped. Only the newest keep_last reports are retained and returned.
        """
        reports: Deque[CycleReport] = deque(maxlen=max(1, keep_last))
        for i in itertools.count():
            report = self.run_cycle()
            reports.append(report)
            log.info("cycle %d done: %s", i + 1, report.summary())
            if max_cycles is not None and i + 1 >= max_cycles:
                break
            self.state = "scheduled"
            log.info("next cycle in %.0fs", interval_seconds)
            self._sleep(interval_seconds)
        return list(reports)


def build_orchestrator(
    cfg: Settings,
    picker: Optional[TopicPicker] = None,
) -> DiscoveryOrchestrator:
    primary, fallback = build_providers(cfg)
    return DiscoveryOrchestrator(
        corpus=GuideStore(cfg.guides_file),
        pending=PendingStore(cfg.pending_file),
        primary=primary,
        fallback=fallback,
        generator=GuideGenerator(build_cfg_from_settings(cfg)),
        picker=picker,
        batch_size=cfg.batch_size,
        query_delay_seconds=cfg.query_delay_seconds,
    )
