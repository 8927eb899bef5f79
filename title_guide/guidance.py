"""The debounced guidance loop that turns form changes into assistant messages."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .autofix import AutofixAction, AutofixOutcome, FormMutations, apply_autofix, get_autofix
from .config import GuidanceConfig
from .intents import Evaluation, Intent, IntentSelection, evaluate_form, select_intent
from .memory import AssistantMemory
from .models import FormSnapshot
from .signals import missing_credit_categories
from .timers import RepeatingTimer, Scheduler, SlotTimer
from .tone import Tone, apply_tone, select_tone
from .utils import timestamp_ms
from .variants import fill_template, pick_variant

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    EVALUATING = "evaluating"
    THINKING = "thinking"
    MESSAGE_READY = "message_ready"
    DISABLED = "disabled"


@dataclass(slots=True, frozen=True)
class GuidanceMessage:
    text: str
    intent: Intent
    autofix: Optional[AutofixAction] = None


@dataclass(slots=True, frozen=True)
class GuidanceResult:
    primary: Optional[GuidanceMessage] = None
    secondary: Tuple[GuidanceMessage, ...] = field(default_factory=tuple)
    thinking: bool = False
    tone: Tone = Tone.NEUTRAL


EMPTY_RESULT = GuidanceResult()

UpdateCallback = Callable[[GuidanceResult], None]


class GuidanceLoop:
    """Coordinates evaluation, intent selection, tone and message rendering.

    ``IDLE -> DEBOUNCING -> EVALUATING -> THINKING -> MESSAGE_READY -> IDLE``.
    At most one debounce timer and one thinking timer are outstanding; a form
    change cancels both before re-arming the debounce. The snapshot is read
    through ``get_snapshot`` when a timer fires, never when it is armed.
    """

    def __init__(
        self,
        get_snapshot: Callable[[], FormSnapshot],
        memory: AssistantMemory,
        scheduler: Scheduler,
        *,
        on_update: UpdateCallback | None = None,
        config: GuidanceConfig | None = None,
        rng: Any = random,
        clock: Callable[[], int] = timestamp_ms,
    ) -> None:
        self._get_snapshot = get_snapshot
        self.memory = memory
        self.config = config or GuidanceConfig()
        self._on_update = on_update
        self._rng = rng
        self._clock = clock
        self._debounce = SlotTimer(scheduler, "guidance debounce")
        self._thinking = SlotTimer(scheduler, "guidance thinking")
        self._idle_poll = RepeatingTimer(scheduler, self.config.idle_poll_ms, self._poll_idle, "idle poll")
        self.state = LoopState.DISABLED
        self.result = EMPTY_RESULT

    @property
    def enabled(self) -> bool:
        return self.state is not LoopState.DISABLED

    def start(self) -> None:
        """Enable guidance, start idle polling and schedule a first evaluation."""

        if self.enabled:
            return
        self.state = LoopState.IDLE
        self._idle_poll.start()
        logger.debug("Guidance loop started")
        self.notify_change()

    def stop(self) -> None:
        """Cancel every timer and clear the current message synchronously."""

        self._debounce.cancel()
        self._thinking.cancel()
        self._idle_poll.stop()
        was_enabled = self.enabled
        self.state = LoopState.DISABLED
        if was_enabled:
            logger.debug("Guidance loop stopped")
            self._publish(EMPTY_RESULT)

    def notify_change(self) -> None:
        if not self.enabled:
            return
        self._thinking.cancel()
        self.state = LoopState.DEBOUNCING
        self._debounce.arm(self.config.debounce_ms, self.evaluate_now)

    def evaluate_now(self) -> None:
        """Evaluate the current snapshot immediately, bypassing the debounce."""

        if not self.enabled:
            return
        self._debounce.cancel()
        self.state = LoopState.EVALUATING
        snapshot = self._get_snapshot()
        evaluation = evaluate_form(snapshot)
        prev_confidence = self.memory.prev_confidence
        self.memory.tick(evaluation.confidence)

        now = self._clock()
        selection = select_intent(
            evaluation,
            self.memory,
            now_ms=now,
            almost_ready_threshold=self.config.almost_ready_threshold,
            idle_threshold_ms=self.config.idle_threshold_ms,
        )
        tone = select_tone(
            evaluation.confidence,
            prev_confidence,
            self.memory.frustration_score,
            bool(evaluation.blockers),
            self.memory.idle_since,
            now_ms=now,
        )
        if selection is None:
            self._thinking.cancel()
            self.state = LoopState.IDLE
            self._publish(EMPTY_RESULT)
            return

        self.state = LoopState.THINKING
        self._publish(GuidanceResult(primary=self.result.primary, secondary=self.result.secondary, thinking=True, tone=tone))
        delay = self.config.thinking_min_ms + self._rng.random() * self.config.thinking_jitter_ms
        self._thinking.arm(delay, lambda: self._materialize(selection, evaluation, snapshot, tone))

    def apply_fix(self, message: GuidanceMessage, store: FormMutations) -> AutofixOutcome | None:
        """Run the message's auto-fix against ``store`` and remember it."""

        if message.autofix is None:
            return None
        outcome = apply_autofix(message.autofix, self._get_snapshot(), store, now_ms=self._clock())
        self.memory.record_fix(message.autofix.fix_id)
        self.notify_change()
        return outcome

    def _poll_idle(self) -> None:
        if not self.enabled:
            return
        idle_ms = self._clock() - self.memory.idle_since
        if idle_ms > self.config.idle_threshold_ms and not self.memory.is_on_cooldown(Intent.IDLE_NUDGE):
            logger.debug("Idle for %s ms, evaluating", idle_ms)
            self.evaluate_now()

    def _materialize(
        self,
        selection: IntentSelection,
        evaluation: Evaluation,
        snapshot: FormSnapshot,
        tone: Tone,
    ) -> None:
        if not self.enabled:
            return
        variables = template_variables(snapshot, evaluation)
        variant = pick_variant(selection.primary, self.memory.last_message_id, rng=self._rng)
        text = apply_tone(fill_template(variant.text, variables), tone, rng=self._rng)
        primary = GuidanceMessage(text=text, intent=selection.primary, autofix=get_autofix(selection.primary))

        self.memory.record_intent(selection.primary, variant.id)
        self.memory.clear_fixes()

        secondary = tuple(
            GuidanceMessage(text=fill_template(pick_variant(intent, rng=self._rng).text, variables), intent=intent)
            for intent in selection.secondary
        )
        self.state = LoopState.MESSAGE_READY
        logger.debug("Guidance ready: %s (%s)", selection.primary.value, variant.id)
        self._publish(GuidanceResult(primary=primary, secondary=secondary, thinking=False, tone=tone))
        self.state = LoopState.IDLE

    def _publish(self, result: GuidanceResult) -> None:
        self.result = result
        if self._on_update is not None:
            self._on_update(result)


def template_variables(snapshot: FormSnapshot, evaluation: Evaluation) -> Dict[str, str]:
    title = snapshot.core.title.strip()
    return {
        "confidence": str(evaluation.confidence),
        "nextAction": evaluation.next_best_action,
        "fieldName": title or "untitled",
        "missingCount": str(missing_credit_categories(snapshot)),
    }
