"""Per-step completion checks for the five wizard steps."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import FormSnapshot
from .signals import MIN_MAJOR_CREDIT_CATEGORIES

STEP_NAMES = ("Core", "Evidence & dates", "Identity", "Production", "Credits")

_EVIDENCE_URL = re.compile(r"^https?://.+\..+")


@dataclass(slots=True, frozen=True)
class StepValidation:
    valid: bool
    met: int
    total: int


@dataclass(slots=True, frozen=True)
class StepValidationResult:
    steps: Tuple[StepValidation, ...]
    completion_percent: int


def _step(checks: Sequence[bool]) -> StepValidation:
    met = sum(1 for check in checks if check)
    return StepValidation(valid=met == len(checks), met=met, total=len(checks))


def step_checks(snapshot: FormSnapshot) -> List[List[bool]]:
    core = snapshot.core
    mandatory = snapshot.mandatory
    identity = snapshot.identity
    production = snapshot.production
    has_release_date = any(
        row.country and row.month and len(row.year) == 4 and row.release_type
        for row in mandatory.release_dates
    )
    has_evidence = any(
        _EVIDENCE_URL.match(link.url) and link.label.strip()
        for link in mandatory.misc_links
    )
    return [
        [
            bool(core.title.strip()),
            core.title_checked,
            core.type != "",
            core.status != "",
            core.year is not None,
            core.contributor_role != "",
        ],
        [has_release_date, has_evidence],
        [bool(identity.countries_of_origin), bool(identity.languages)],
        [production.budget.currency != "" and production.budget.amount is not None],
        [
            bool(production.directors),
            snapshot.credits.major_credits.filled_count() >= MIN_MAJOR_CREDIT_CATEGORIES,
        ],
    ]


def compute_step_validation(snapshot: FormSnapshot) -> StepValidationResult:
    steps = tuple(_step(checks) for checks in step_checks(snapshot))
    met = sum(step.met for step in steps)
    total = sum(step.total for step in steps)
    percent = int(met / total * 100 + 0.5) if total else 0
    return StepValidationResult(steps=steps, completion_percent=percent)
