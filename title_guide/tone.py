"""Tone selection and the light-touch phrasing that goes with each tone."""

from __future__ import annotations

import random
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .utils import timestamp_ms

FRUSTRATION_CALM_AT = 3
IDLE_CALM_AFTER_MS = 15_000
PREFIX_PROBABILITY = 0.4
SUFFIX_PROBABILITY = 0.3


class Tone(str, Enum):
    NEUTRAL = "neutral"
    ENCOURAGING = "encouraging"
    CALM = "calm"
    DIRECT = "direct"


TONE_PREFIXES: Dict[Tone, Tuple[str, ...]] = {
    Tone.NEUTRAL: (),
    Tone.ENCOURAGING: ("Great progress.", "You're doing well.", "Keep it up."),
    Tone.CALM: ("No worries.", "Take your time.", "No rush."),
    Tone.DIRECT: (),
}

TONE_SUFFIXES: Dict[Tone, Tuple[str, ...]] = {
    Tone.NEUTRAL: (),
    Tone.ENCOURAGING: ("You've got this.", "Almost there."),
    Tone.CALM: ("I'm here to help.", "One step at a time."),
    Tone.DIRECT: (),
}


def select_tone(
    confidence: int,
    prev_confidence: int,
    frustration_score: int,
    has_blocker: bool,
    idle_since: int,
    *,
    now_ms: Optional[int] = None,
) -> Tone:
    now = timestamp_ms() if now_ms is None else now_ms
    idle_ms = now - idle_since if idle_since > 0 else 0

    if frustration_score >= FRUSTRATION_CALM_AT:
        return Tone.CALM
    if prev_confidence > 0 and confidence < prev_confidence:
        return Tone.ENCOURAGING
    if idle_ms > IDLE_CALM_AFTER_MS:
        return Tone.CALM
    if has_blocker:
        return Tone.DIRECT
    if prev_confidence > 0 and confidence > prev_confidence:
        return Tone.ENCOURAGING
    return Tone.NEUTRAL


def apply_tone(text: str, tone: Tone, *, rng: Any = random) -> str:
    """Decorate ``text`` with a prefix or a suffix for the warmer tones.

    Prefix and suffix are mutually exclusive; most of the time the text is
    left alone so repeated messages do not read as formulaic.
    """

    if tone in (Tone.NEUTRAL, Tone.DIRECT):
        return text
    prefixes = TONE_PREFIXES[tone]
    suffixes = TONE_SUFFIXES[tone]
    if prefixes and rng.random() < PREFIX_PROBABILITY:
        return f"{prefixes[rng.randrange(len(prefixes))]} {text}"
    if suffixes and rng.random() < SUFFIX_PROBABILITY:
        return f"{text} {suffixes[rng.randrange(len(suffixes))]}"
    return text
