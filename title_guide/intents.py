"""Intent catalog and the priority rules that pick what the assistant says."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from .models import FormSignals, FormSnapshot
from .signals import compute_confidence, compute_signals, derive_next_action
from .snapshot import snapshot_from_dict
from .utils import timestamp_ms

logger = logging.getLogger(__name__)

ALMOST_READY_THRESHOLD = 80
IDLE_NUDGE_AFTER_MS = 20_000
MAX_SECONDARY = 2


class Intent(str, Enum):
    MISSING_EVIDENCE = "MISSING_EVIDENCE"
    MISSING_RELEASE_DATE = "MISSING_RELEASE_DATE"
    CREDITS_REQUIRED = "CREDITS_REQUIRED"
    YEAR_FORMAT = "YEAR_FORMAT"
    TYPE_SUBTYPE_MISMATCH = "TYPE_SUBTYPE_MISMATCH"
    TITLE_CAPITALIZATION = "TITLE_CAPITALIZATION"
    NEXT_BEST_ACTION = "NEXT_BEST_ACTION"
    ALMOST_READY = "ALMOST_READY"
    IDLE_NUDGE = "IDLE_NUDGE"
    SUCCESS_ACK = "SUCCESS_ACK"


# Scan order matters: the first active blocker becomes the primary intent.
BLOCKER_SIGNALS: Tuple[Tuple[str, Intent], ...] = (
    ("missing_evidence", Intent.MISSING_EVIDENCE),
    ("missing_release_date", Intent.MISSING_RELEASE_DATE),
    ("credits_incomplete", Intent.CREDITS_REQUIRED),
    ("year_invalid", Intent.YEAR_FORMAT),
    ("type_subtype_mismatch", Intent.TYPE_SUBTYPE_MISMATCH),
)

WARNING_SIGNALS: Tuple[Tuple[str, Intent], ...] = (
    ("title_lowercase", Intent.TITLE_CAPITALIZATION),
)


@dataclass(slots=True, frozen=True)
class Evaluation:
    """Everything the selector needs to know about one snapshot."""

    confidence: int
    blockers: Tuple[Intent, ...]
    warnings: Tuple[Intent, ...]
    suggestions: Tuple[Intent, ...]
    next_best_action: str
    signals: FormSignals


@dataclass(slots=True, frozen=True)
class IntentSelection:
    primary: Intent
    secondary: Tuple[Intent, ...] = field(default_factory=tuple)


class MemoryView(Protocol):
    """The read side of the assistant memory used during selection."""

    recent_fixes: Sequence[str]
    frustration_score: int
    idle_since: int

    def is_on_cooldown(self, intent: Intent) -> bool: ...


def evaluate_form(snapshot: FormSnapshot | Any) -> Evaluation:
    """Derive signals, blockers, warnings and the next best action.

    Accepts a raw dictionary too, so callers in the middle of hydrating a
    draft can evaluate without building a snapshot first.
    """

    if not isinstance(snapshot, FormSnapshot):
        snapshot = snapshot_from_dict(snapshot)
    signals = compute_signals(snapshot)
    blockers = tuple(intent for flag, intent in BLOCKER_SIGNALS if getattr(signals, flag))
    warnings = tuple(intent for flag, intent in WARNING_SIGNALS if getattr(signals, flag))
    next_action = derive_next_action(signals)
    return Evaluation(
        confidence=compute_confidence(snapshot),
        blockers=blockers,
        warnings=warnings,
        suggestions=(Intent.NEXT_BEST_ACTION,) if next_action else (),
        next_best_action=next_action,
        signals=signals,
    )


def select_intent(
    evaluation: Evaluation,
    memory: MemoryView,
    *,
    now_ms: Optional[int] = None,
    almost_ready_threshold: int = ALMOST_READY_THRESHOLD,
    idle_threshold_ms: int = IDLE_NUDGE_AFTER_MS,
) -> IntentSelection | None:
    """Choose one primary intent and up to two secondary ones, or nothing."""

    now = timestamp_ms() if now_ms is None else now_ms
    idle_ms = now - memory.idle_since if memory.idle_since > 0 else 0

    active_blockers = [b for b in evaluation.blockers if not memory.is_on_cooldown(b)]
    active_warnings = [w for w in evaluation.warnings if not memory.is_on_cooldown(w)]

    if memory.recent_fixes and not memory.is_on_cooldown(Intent.SUCCESS_ACK):
        remaining = (active_blockers + active_warnings)[:MAX_SECONDARY]
        return _chosen(IntentSelection(Intent.SUCCESS_ACK, tuple(remaining)))

    if active_blockers:
        secondary: List[Intent] = active_blockers[1:] + active_warnings
        return _chosen(IntentSelection(active_blockers[0], tuple(secondary[:MAX_SECONDARY])))

    if active_warnings:
        return _chosen(IntentSelection(active_warnings[0], tuple(active_warnings[1 : 1 + MAX_SECONDARY])))

    if evaluation.next_best_action and not memory.is_on_cooldown(Intent.NEXT_BEST_ACTION):
        return _chosen(IntentSelection(Intent.NEXT_BEST_ACTION))

    if evaluation.confidence >= almost_ready_threshold and not memory.is_on_cooldown(Intent.ALMOST_READY):
        return _chosen(IntentSelection(Intent.ALMOST_READY))

    if idle_ms > idle_threshold_ms and not memory.is_on_cooldown(Intent.IDLE_NUDGE):
        return _chosen(IntentSelection(Intent.IDLE_NUDGE))

    logger.debug("No intent selected (confidence=%s, idle_ms=%s)", evaluation.confidence, idle_ms)
    return None


def _chosen(selection: IntentSelection) -> IntentSelection:
    logger.debug(
        "Selected intent %s (secondary=%s)",
        selection.primary.value,
        [intent.value for intent in selection.secondary],
    )
    return selection
