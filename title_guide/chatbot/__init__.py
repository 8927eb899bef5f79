"""Rule-based help chatbot for the submission wizard."""

from .knowledge_base import FALLBACK, FALLBACK_VARIANTS, INTENTS, IntentEntry
from .matcher import IntentMatcher, MatchResult, match_intent, normalize

__all__ = [
    "FALLBACK",
    "FALLBACK_VARIANTS",
    "INTENTS",
    "IntentEntry",
    "IntentMatcher",
    "MatchResult",
    "match_intent",
    "normalize",
]
