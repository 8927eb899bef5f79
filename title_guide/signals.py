"""Form signal model: pure predicates and the weighted confidence score."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .models import Budget, FormSignals, FormSnapshot

MIN_MAJOR_CREDIT_CATEGORIES = 3

Check = Callable[[FormSnapshot], bool]


@dataclass(slots=True, frozen=True)
class ConfidenceWeight:
    name: str
    test: Check
    weight: int


def _items(value: Optional[Sequence[Any]]) -> Sequence[Any]:
    return value or ()


def _text(value: Optional[str]) -> str:
    return value if isinstance(value, str) else ""


def _budget(s: FormSnapshot) -> Budget:
    return s.production.budget or Budget()


def _major_credits_met(s: FormSnapshot) -> bool:
    major = s.credits.major_credits
    return major is not None and major.filled_count() >= MIN_MAJOR_CREDIT_CATEGORIES


def _recommended_filled(s: FormSnapshot) -> bool:
    info = s.credits.recommended_info
    return info is not None and info.any_filled()


# Title, type, year and credits carry the most weight. Total capacity is 100.
CONFIDENCE_WEIGHTS: Tuple[ConfidenceWeight, ...] = (
    ConfidenceWeight("title", lambda s: len(_text(s.core.title)) > 0, 12),
    ConfidenceWeight("type", lambda s: _text(s.core.type) != "", 8),
    ConfidenceWeight("subtype", lambda s: _text(s.core.subtype) != "", 4),
    ConfidenceWeight("status", lambda s: _text(s.core.status) != "", 4),
    ConfidenceWeight("year", lambda s: s.core.year is not None, 8),
    ConfidenceWeight("role", lambda s: _text(s.core.contributor_role) != "", 4),
    ConfidenceWeight("release_dates", lambda s: len(_items(s.mandatory.release_dates)) > 0, 8),
    ConfidenceWeight("evidence", lambda s: len(_items(s.mandatory.misc_links)) > 0, 5),
    ConfidenceWeight("countries", lambda s: len(_items(s.identity.countries_of_origin)) > 0, 6),
    ConfidenceWeight("languages", lambda s: len(_items(s.identity.languages)) > 0, 5),
    ConfidenceWeight("color_format", lambda s: _text(s.identity.color_format) != "", 2),
    ConfidenceWeight("genres", lambda s: len(_items(s.identity.genres)) > 0, 4),
    ConfidenceWeight("budget", lambda s: _budget(s).amount is not None, 5),
    ConfidenceWeight("official_sites", lambda s: len(_items(s.production.official_sites)) > 0, 2),
    ConfidenceWeight("directors", lambda s: len(_items(s.production.directors)) > 0, 5),
    ConfidenceWeight("distributors", lambda s: len(_items(s.production.distributors)) > 0, 3),
    ConfidenceWeight("production_companies", lambda s: len(_items(s.production.production_companies)) > 0, 3),
    ConfidenceWeight("major_credits", _major_credits_met, 10),
    ConfidenceWeight("recommended_info", _recommended_filled, 2),
)


def compute_confidence(snapshot: FormSnapshot) -> int:
    """Sum the weights of every satisfied completion check, clamped to 0-100."""

    score = sum(w.weight for w in CONFIDENCE_WEIGHTS if w.test(snapshot))
    return max(0, min(score, 100))


def _year_invalid(year: object) -> bool:
    return isinstance(year, bool) or not isinstance(year, int) or not 1000 <= year <= 9999


def compute_signals(snapshot: FormSnapshot) -> FormSignals:
    """Evaluate every predicate; ``None`` anywhere reads as unset."""

    core = snapshot.core
    mandatory = snapshot.mandatory
    identity = snapshot.identity
    budget = _budget(snapshot)
    title = _text(core.title)
    return FormSignals(
        missing_evidence=len(_items(mandatory.misc_links)) == 0,
        missing_release_date=len(_items(mandatory.release_dates)) == 0,
        year_invalid=_year_invalid(core.year),
        title_lowercase=len(title) > 0 and title[0] != title[0].upper(),
        type_subtype_mismatch=core.type == "musicVideo" and core.subtype == "featureLength",
        credits_incomplete=not _major_credits_met(snapshot),
        title_missing=len(title.strip()) == 0,
        type_missing=not core.type,
        status_missing=not core.status,
        role_missing=not core.contributor_role,
        countries_missing=len(_items(identity.countries_of_origin)) == 0,
        languages_missing=len(_items(identity.languages)) == 0,
        genres_missing=len(_items(identity.genres)) == 0,
        budget_missing=budget.amount is None or not budget.currency,
    )


# First unmet entry wins.
NEXT_ACTIONS: List[Tuple[str, str]] = [
    ("title_missing", "Enter a title for your submission"),
    ("type_missing", "Select a title type"),
    ("status_missing", "Set the release status"),
    ("year_invalid", "Add the release year"),
    ("role_missing", "Choose your contributor role"),
    ("missing_evidence", "Add an evidence link"),
    ("missing_release_date", "Add at least one release date"),
    ("countries_missing", "Add a country of origin"),
    ("languages_missing", "Add at least one language"),
    ("genres_missing", "Select at least one genre"),
    ("budget_missing", "Enter the production budget"),
    ("credits_incomplete", "Fill in at least 3 credit categories"),
]


def derive_next_action(signals: FormSignals) -> str:
    for flag, action in NEXT_ACTIONS:
        if getattr(signals, flag):
            return action
    return ""


def missing_credit_categories(snapshot: FormSnapshot) -> int:
    major = snapshot.credits.major_credits
    filled = major.filled_count() if major is not None else 0
    return max(0, MIN_MAJOR_CREDIT_CATEGORIES - filled)
