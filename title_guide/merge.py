"""Merging voice-parsed drafts into the current form without clobbering user edits."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .models import (
    CONTRIBUTOR_ROLES,
    RELEASE_TYPES,
    TITLE_STATUSES,
    TITLE_SUBTYPES,
    TITLE_TYPES,
    Assumption,
    Director,
    FormSnapshot,
    ProductionInfo,
    ReleaseDate,
)
from .utils import as_list, choice_field, dedupe_append, field_value, text_field, timestamp_ms

logger = logging.getLogger(__name__)

MIN_TRANSCRIPT_CHARS = 5
MAX_TRANSCRIPT_CHARS = 5000


def validate_transcript(transcript: Any) -> str:
    """Return the stripped transcript or raise ``ValueError``."""

    text = transcript.strip() if isinstance(transcript, str) else ""
    if len(text) < MIN_TRANSCRIPT_CHARS:
        raise ValueError("Transcript too short")
    if len(text) > MAX_TRANSCRIPT_CHARS:
        raise ValueError(f"Transcript too long (max {MAX_TRANSCRIPT_CHARS} chars)")
    return text


def _core_patch(snapshot: FormSnapshot, parsed: Any) -> Dict[str, Any]:
    core = snapshot.core
    patch: Dict[str, Any] = {}
    title = text_field(parsed, "title")
    if title and not core.title:
        patch["title"] = title
    for name, allowed, keys in (
        ("type", TITLE_TYPES, ("type",)),
        ("subtype", TITLE_SUBTYPES, ("subtype",)),
        ("status", TITLE_STATUSES, ("status",)),
        ("contributor_role", CONTRIBUTOR_ROLES, ("contributorRole", "contributor_role")),
    ):
        value = choice_field(parsed, allowed, *keys)
        if value and not getattr(core, name):
            patch[name] = value
    year = field_value(parsed, "year")
    if isinstance(year, int) and not isinstance(year, bool) and year and core.year is None:
        patch["year"] = year
    return patch


def _parsed_release_dates(rows: Iterable[Any], stamp: int) -> Tuple[ReleaseDate, ...]:
    kept = [row for row in rows if isinstance(row, Mapping) and text_field(row, "country")]
    return tuple(
        ReleaseDate(
            id=f"voice-rd-{stamp}-{i}",
            country=text_field(row, "country"),
            day=text_field(row, "day"),
            month=text_field(row, "month"),
            year=text_field(row, "year"),
            release_type=choice_field(row, RELEASE_TYPES, "releaseType", "release_type"),
            note=text_field(row, "note"),
        )
        for i, row in enumerate(kept)
    )


def _parsed_directors(rows: Iterable[Any], stamp: int) -> Tuple[Director, ...]:
    kept = [row for row in rows if isinstance(row, Mapping) and text_field(row, "name")]
    return tuple(
        Director(
            id=f"voice-dir-{stamp}-{i}",
            name=text_field(row, "name"),
            role=text_field(row, "role") or "Director",
            attribute=text_field(row, "attribute"),
        )
        for i, row in enumerate(kept)
    )


def merge_parsed(
    snapshot: FormSnapshot,
    parsed: Any,
    assumptions: Iterable[Any] = (),
    *,
    clock: Callable[[], int] = timestamp_ms,
) -> FormSnapshot:
    """Fold a voice-parsed payload into ``snapshot`` and return the result.

    Scalars only fill blanks, lists are appended without duplicates, and every
    assumption string becomes an :class:`Assumption` on ``meta``. Parts of
    ``parsed`` with the wrong shape are skipped.
    """

    stamp = clock()
    merged = snapshot

    core_patch = _core_patch(snapshot, field_value(parsed, "core"))
    if core_patch:
        merged = replace(merged, core=replace(merged.core, **core_patch))

    identity = field_value(parsed, "identity")
    if isinstance(identity, Mapping):
        current = merged.identity
        merged = replace(
            merged,
            identity=replace(
                current,
                countries_of_origin=tuple(
                    dedupe_append(current.countries_of_origin, as_list(field_value(identity, "countriesOfOrigin", "countries_of_origin")))
                ),
                languages=tuple(dedupe_append(current.languages, as_list(field_value(identity, "languages")))),
                genres=tuple(dedupe_append(current.genres, as_list(field_value(identity, "genres")))),
            ),
        )

    mandatory = field_value(parsed, "mandatory")
    new_dates = _parsed_release_dates(as_list(field_value(mandatory, "releaseDates", "release_dates")), stamp)
    if new_dates:
        merged = replace(
            merged,
            mandatory=replace(merged.mandatory, release_dates=merged.mandatory.release_dates + new_dates),
        )

    production = field_value(parsed, "production")
    if isinstance(production, Mapping):
        merged = replace(merged, production=_merge_production(merged, production, stamp))

    records = tuple(
        Assumption(id=f"voice-a-{stamp}-{i}", field="voice", value="", message=message)
        for i, message in enumerate(item for item in assumptions if isinstance(item, str) and item)
    )
    if records:
        merged = replace(merged, meta=replace(merged.meta, assumptions=merged.meta.assumptions + records))

    if merged != snapshot:
        logger.debug("Merged voice draft (%d assumptions)", len(records))
    return merged


def _merge_production(snapshot: FormSnapshot, production: Mapping[str, Any], stamp: int) -> ProductionInfo:
    current = snapshot.production
    budget = current.budget
    parsed_budget = field_value(production, "budget")
    if isinstance(parsed_budget, Mapping) and budget.amount is None:
        currency = text_field(parsed_budget, "currency")
        amount = _positive_amount(field_value(parsed_budget, "amount"))
        budget = replace(budget, currency=currency or budget.currency, amount=amount)
    directors = current.directors + _parsed_directors(as_list(field_value(production, "directors")), stamp)
    return replace(current, budget=budget, directors=directors)


def _positive_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    return float(value)
