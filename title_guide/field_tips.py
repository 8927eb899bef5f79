"""Per-step field rules producing inline tips.

Each rule inspects one field and answers with a rule key and severity, or
``None``. Unlike the assistant's single primary message, every field can
carry a tip at the same time.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional, Sequence

from .config import GuidanceConfig
from .field_variants import FieldVariantPicker
from .models import UNKNOWN_YEAR, FieldTip, FormSnapshot
from .signals import MIN_MAJOR_CREDIT_CATEGORIES
from .timers import Scheduler, SlotTimer

logger = logging.getLogger(__name__)

INFO = "info"
WARNING = "warning"

MAX_GENRES = 5
LOW_BUDGET = 1000
FUTURE_YEAR_SLACK = 5
_URL_PROTOCOL = re.compile(r"^https?://")

FieldTipMap = Dict[str, FieldTip]


@dataclass(slots=True, frozen=True)
class TipTemplate:
    rule_key: str
    severity: str


@dataclass(slots=True, frozen=True)
class FieldRule:
    field_path: str
    check: Callable[[FormSnapshot, int], Optional[TipTemplate]]


def _title_rule(s: FormSnapshot, year: int) -> Optional[TipTemplate]:
    title = s.core.title.strip()
    if not title:
        return TipTemplate("title_empty", INFO)
    if re.match(r"^[a-z]", title):
        return TipTemplate("title_lowercase", WARNING)
    if not s.core.title_checked:
        return TipTemplate("title_not_verified", INFO)
    return None


def _year_rule(s: FormSnapshot, year: int) -> Optional[TipTemplate]:
    if s.core.year is None:
        return TipTemplate("year_missing", INFO)
    if s.core.year != UNKNOWN_YEAR and s.core.year > year + FUTURE_YEAR_SLACK:
        return TipTemplate("year_future", WARNING)
    return None


def _evidence_rule(s: FormSnapshot, year: int) -> Optional[TipTemplate]:
    links = s.mandatory.misc_links
    if not links:
        return TipTemplate("evidence_empty", WARNING)
    if any(link.url and not _URL_PROTOCOL.match(link.url) for link in links):
        return TipTemplate("evidence_url_invalid", WARNING)
    return None


def _release_dates_rule(s: FormSnapshot, year: int) -> Optional[TipTemplate]:
    rows = s.mandatory.release_dates
    if not rows:
        return TipTemplate("release_date_empty", WARNING)
    if any(not (row.country and row.month and row.year) for row in rows):
        return TipTemplate("release_date_incomplete", INFO)
    return None


def _genres_rule(s: FormSnapshot, year: int) -> Optional[TipTemplate]:
    genres = s.identity.genres
    if not genres:
        return TipTemplate("genres_empty", INFO)
    if len(genres) > MAX_GENRES:
        return TipTemplate("genres_many", WARNING)
    return None


def _budget_rule(s: FormSnapshot, year: int) -> Optional[TipTemplate]:
    amount = s.production.budget.amount
    if amount is None:
        return TipTemplate("budget_missing", INFO)
    if amount < LOW_BUDGET:
        return TipTemplate("budget_low", WARNING)
    return None


def _when(predicate: Callable[[FormSnapshot], bool], rule_key: str, severity: str = INFO):
    def check(s: FormSnapshot, year: int) -> Optional[TipTemplate]:
        return TipTemplate(rule_key, severity) if predicate(s) else None

    return check


STEP_RULES: Sequence[Sequence[FieldRule]] = (
    (
        FieldRule("core.title", _title_rule),
        FieldRule("core.type", _when(lambda s: s.core.type == "", "type_empty")),
        FieldRule("core.status", _when(lambda s: s.core.status == "", "status_empty")),
        FieldRule("core.year", _year_rule),
        FieldRule("core.contributorRole", _when(lambda s: s.core.contributor_role == "", "role_empty")),
    ),
    (
        FieldRule("mandatory.evidence", _evidence_rule),
        FieldRule("mandatory.releaseDates", _release_dates_rule),
    ),
    (
        FieldRule("identity.countries", _when(lambda s: not s.identity.countries_of_origin, "countries_empty")),
        FieldRule("identity.languages", _when(lambda s: not s.identity.languages, "languages_empty")),
        FieldRule("identity.genres", _genres_rule),
    ),
    (
        FieldRule("production.budget", _budget_rule),
        FieldRule("production.directors", _when(lambda s: not s.production.directors, "directors_empty", WARNING)),
    ),
    (
        FieldRule(
            "credits.major",
            _when(
                lambda s: s.credits.major_credits.filled_count() < MIN_MAJOR_CREDIT_CATEGORIES,
                "credits_incomplete",
                WARNING,
            ),
        ),
    ),
)


def evaluate_field_tips(
    snapshot: FormSnapshot,
    step: int,
    picker: Optional[FieldVariantPicker] = None,
    *,
    current_year: Optional[int] = None,
) -> FieldTipMap:
    """Return a fresh tip map for wizard ``step``; unknown steps yield ``{}``."""

    if not 0 <= step < len(STEP_RULES):
        return {}
    picker = picker or FieldVariantPicker()
    year = current_year if current_year is not None else date.today().year
    tips: FieldTipMap = {}
    for rule in STEP_RULES[step]:
        template = rule.check(snapshot, year)
        if template is None:
            continue
        tips[rule.field_path] = FieldTip(primary_tip=picker.pick(template.rule_key), severity=template.severity)
    return tips


class FieldTipWatcher:
    """Recomputes tips for the active step after edits to that step settle.

    Edits elsewhere in the form leave the pending timer alone; only a change in
    the active step's own slice restarts the debounce.
    """

    def __init__(
        self,
        get_snapshot: Callable[[], FormSnapshot],
        on_tips: Callable[[FieldTipMap], None],
        scheduler: Scheduler,
        *,
        step: int = 0,
        debounce_ms: Optional[int] = None,
        picker: Optional[FieldVariantPicker] = None,
        config: GuidanceConfig | None = None,
    ) -> None:
        self._get_snapshot = get_snapshot
        self._on_tips = on_tips
        self._timer = SlotTimer(scheduler, "field-tip debounce")
        config = config or GuidanceConfig()
        self._debounce_ms = config.field_tip_debounce_ms if debounce_ms is None else debounce_ms
        self._picker = picker or FieldVariantPicker()
        self._step = step
        self._last_slice: object = None
        self.tips: FieldTipMap = {}

    @property
    def step(self) -> int:
        return self._step

    def set_step(self, step: int) -> None:
        if step == self._step:
            return
        self._step = step
        self._last_slice = None
        self.notify_change()

    def notify_change(self) -> None:
        current = self._get_snapshot().step_slice(self._step)
        if current == self._last_slice and self._last_slice is not None:
            return
        self._last_slice = current
        self._timer.arm(self._debounce_ms, self._compute)

    def cancel(self) -> None:
        self._timer.cancel()

    def _compute(self) -> None:
        self.tips = evaluate_field_tips(self._get_snapshot(), self._step, self._picker)
        logger.debug("Field tips for step %s: %s", self._step, sorted(self.tips))
        self._on_tips(self.tips)