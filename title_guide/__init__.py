"""Guidance engine for the new-title submission wizard."""

from .chatbot import IntentMatcher, MatchResult, match_intent
from .guidance import GuidanceLoop, GuidanceMessage, GuidanceResult
from .intents import Evaluation, Intent, IntentSelection, evaluate_form, select_intent
from .memory import AssistantMemory
from .models import FormSnapshot
from .snapshot import snapshot_from_dict
from .store import FormStore

__all__ = [
    "GuidanceLoop",
    "GuidanceMessage",
    "GuidanceResult",
    "AssistantMemory",
    "FormStore",
    "FormSnapshot",
    "snapshot_from_dict",
    "Intent",
    "IntentSelection",
    "Evaluation",
    "evaluate_form",
    "select_intent",
    "IntentMatcher",
    "MatchResult",
    "match_intent",
]
