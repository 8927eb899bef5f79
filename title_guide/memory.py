"""Process-local assistant memory: cooldowns, fixes, frustration and idle time."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .intents import Intent
from .utils import timestamp_ms

logger = logging.getLogger(__name__)

MAX_FRUSTRATION = 5
DEFAULT_COOLDOWN_MS = 20_000

COOLDOWNS_MS: Dict[Intent, int] = {
    Intent.MISSING_EVIDENCE: 20_000,
    Intent.MISSING_RELEASE_DATE: 20_000,
    Intent.CREDITS_REQUIRED: 25_000,
    Intent.YEAR_FORMAT: 15_000,
    Intent.TYPE_SUBTYPE_MISMATCH: 30_000,
    Intent.TITLE_CAPITALIZATION: 30_000,
    Intent.NEXT_BEST_ACTION: 15_000,
    Intent.ALMOST_READY: 25_000,
    Intent.IDLE_NUDGE: 30_000,
    Intent.SUCCESS_ACK: 10_000,
}

Listener = Callable[["AssistantMemory"], None]


@dataclass(slots=True, frozen=True)
class MemorySnapshot:
    """Immutable copy of the memory, with cooldown checks bound to its clock."""

    last_intent: Optional[Intent]
    last_message_id: str
    recent_fixes: Tuple[str, ...]
    frustration_score: int
    idle_since: int
    prev_confidence: int
    cooldowns: Dict[Intent, int] = field(default_factory=dict)
    now_ms: int = 0

    def is_on_cooldown(self, intent: Intent) -> bool:
        expires = self.cooldowns.get(intent)
        return expires is not None and self.now_ms < expires


class AssistantMemory:
    """Tracks what the assistant has said and how the user has responded.

    Nothing is persisted; a fresh instance is the equivalent of a page reload.
    Listeners registered with :meth:`subscribe` are notified after each mutation
    that actually changed state.
    """

    def __init__(self, *, clock: Callable[[], int] = timestamp_ms) -> None:
        self._clock = clock
        self._listeners: List[Listener] = []
        self._init_state()

    def _init_state(self) -> None:
        self.last_intent: Optional[Intent] = None
        self.last_message_id = ""
        self._cooldowns: Dict[Intent, int] = {}
        self._recent_fixes: List[str] = []
        self.frustration_score = 0
        self.idle_since = self._clock()
        self.prev_confidence = 0

    @property
    def recent_fixes(self) -> Tuple[str, ...]:
        return tuple(self._recent_fixes)

    def now(self) -> int:
        return self._clock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def cooldown_expiry(self, intent: Intent) -> Optional[int]:
        return self._cooldowns.get(intent)

    def is_on_cooldown(self, intent: Intent) -> bool:
        expires = self._cooldowns.get(intent)
        if expires is None:
            return False
        return self._clock() < expires

    def record_intent(self, intent: Intent, message_id: str) -> None:
        now = self._clock()
        expires = now + COOLDOWNS_MS.get(intent, DEFAULT_COOLDOWN_MS)
        self._cooldowns[intent] = max(expires, self._cooldowns.get(intent, 0))
        self.last_intent = intent
        self.last_message_id = message_id
        self.idle_since = now
        logger.debug("Recorded intent %s (%s), cooldown until %s", intent.value, message_id, self._cooldowns[intent])
        self._notify()

    def record_fix(self, fix_id: str) -> None:
        self._recent_fixes.append(fix_id)
        self.frustration_score = max(0, self.frustration_score - 1)
        self.idle_since = self._clock()
        self._notify()

    def clear_fixes(self) -> None:
        if not self._recent_fixes:
            return
        self._recent_fixes.clear()
        self._notify()

    def bump_frustration(self) -> None:
        bumped = min(self.frustration_score + 1, MAX_FRUSTRATION)
        if bumped == self.frustration_score:
            return
        self.frustration_score = bumped
        self._notify()

    def reset_idle(self) -> None:
        self.idle_since = self._clock()
        self._notify()

    def tick(self, confidence: int) -> None:
        # Unchanged confidence must not notify, or reactive consumers loop.
        if self.prev_confidence == confidence:
            return
        self.prev_confidence = confidence
        self._notify()

    def reset(self) -> None:
        self._init_state()
        self._notify()

    def snapshot(self) -> MemorySnapshot:
        return MemorySnapshot(
            last_intent=self.last_intent,
            last_message_id=self.last_message_id,
            recent_fixes=self.recent_fixes,
            frustration_score=self.frustration_score,
            idle_since=self.idle_since,
            prev_confidence=self.prev_confidence,
            cooldowns=dict(self._cooldowns),
            now_ms=self._clock(),
        )
