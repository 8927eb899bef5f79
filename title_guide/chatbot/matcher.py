"""Deterministic intent matching for free-text chatbot questions."""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..variants import pick_from_pool
from .knowledge_base import FALLBACK, FALLBACK_VARIANTS, GREETING, INTENTS, THANKS, IntentEntry

logger = logging.getLogger(__name__)

THRESHOLD = 3
EXACT_TRIGGER_SCORE = 10
SUBSTRING_TRIGGER_BASE = 3

GREETING_WORDS = frozenset({"hello", "hi", "hey", "howdy", "hiya", "yo"})
GREETING_PHRASES = frozenset({"good morning", "good evening", "good afternoon", "hey there"})
THANKS_WORDS = frozenset({"thanks", "thx", "cheers", "ty"})
THANKS_PHRASES = frozenset(
    {
        "thank you",
        "appreciate it",
        "got it",
        "perfect",
        "awesome",
        "great thanks",
        "thanks a lot",
        "many thanks",
    }
)

_APOSTROPHES = re.compile(r"['’]")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(slots=True, frozen=True)
class MatchResult:
    intent: str
    answer: str
    confidence: float


def normalize(text: str) -> str:
    """Lowercase, drop apostrophes, turn other punctuation into spaces, collapse runs."""

    lowered = _APOSTROPHES.sub("", text.lower())
    return _WHITESPACE.sub(" ", _NON_ALNUM.sub(" ", lowered)).strip()


def score_intent(normalized: str, words: Sequence[str], entry: IntentEntry) -> int:
    score = 0
    for trigger in entry.triggers:
        if normalized == trigger:
            score += EXACT_TRIGGER_SCORE
        elif trigger in normalized:
            # Longer triggers are more specific.
            score += SUBSTRING_TRIGGER_BASE + len(trigger.split(" "))
    score += sum(1 for keyword in entry.keywords if keyword in words)
    return score


def is_greeting(normalized: str, words: Sequence[str]) -> bool:
    if normalized in GREETING_PHRASES:
        return True
    return len(words) <= 2 and any(word in GREETING_WORDS for word in words)


def is_thanks(normalized: str, words: Sequence[str]) -> bool:
    if normalized in THANKS_PHRASES:
        return True
    return len(words) <= 3 and any(word in THANKS_WORDS for word in words)


class IntentMatcher:
    """Scores a message against the catalog and answers with a fresh variant.

    The only state is the last variant index per intent, kept so that asking
    the same question twice gets a different phrasing.
    """

    def __init__(
        self,
        intents: Sequence[IntentEntry] = INTENTS,
        fallback_variants: Sequence[str] = FALLBACK_VARIANTS,
        *,
        rng: Any = random,
    ) -> None:
        self.intents = tuple(intents)
        self.fallback_variants = tuple(fallback_variants)
        self.rng = rng
        self._by_name: Dict[str, IntentEntry] = {entry.intent: entry for entry in self.intents}
        self._last_variant: Dict[str, int] = {}

    def reset(self) -> None:
        self._last_variant.clear()

    def match(self, text: str) -> MatchResult:
        normalized = normalize(text)
        if not normalized:
            return self._fallback()
        words = normalized.split(" ")

        if is_greeting(normalized, words) and GREETING in self._by_name:
            return self._answer(self._by_name[GREETING], 1.0)
        if is_thanks(normalized, words) and THANKS in self._by_name:
            return self._answer(self._by_name[THANKS], 1.0)

        best: Optional[IntentEntry] = None
        best_score = 0
        for entry in self.intents:
            if entry.intent in (GREETING, THANKS):
                continue
            score = score_intent(normalized, words, entry)
            # Ties keep the earlier catalog entry.
            if score > best_score:
                best, best_score = entry, score

        if best is None or best_score < THRESHOLD:
            logger.debug("No intent above threshold for %r (best=%s)", normalized, best_score)
            return self._fallback()
        logger.debug("Matched %s with score %s", best.intent, best_score)
        return self._answer(best, min(best_score / 10, 1.0))

    def ranked(self, text: str) -> List[Tuple[str, int]]:
        """Return ``(intent, score)`` pairs for every scored intent, best first."""

        normalized = normalize(text)
        words = normalized.split(" ") if normalized else []
        scores = [
            (entry.intent, score_intent(normalized, words, entry))
            for entry in self.intents
            if entry.intent not in (GREETING, THANKS)
        ]
        return sorted((pair for pair in scores if pair[1] > 0), key=lambda pair: -pair[1])

    def _answer(self, entry: IntentEntry, confidence: float) -> MatchResult:
        text = self._pick(entry.intent, entry.variants)
        return MatchResult(intent=entry.intent, answer=text, confidence=confidence)

    def _fallback(self) -> MatchResult:
        return MatchResult(intent=FALLBACK, answer=self._pick(FALLBACK, self.fallback_variants), confidence=0.0)

    def _pick(self, key: str, pool: Sequence[str]) -> str:
        text, index = pick_from_pool(pool, key=key, exclude=self._last_variant.get(key, -1), rng=self.rng)
        if index >= 0:
            self._last_variant[key] = index
        return text


_default_matcher = IntentMatcher()


def match_intent(text: str) -> MatchResult:
    """Match ``text`` with the process-wide matcher."""

    return _default_matcher.match(text)
