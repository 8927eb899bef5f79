"""Coercion of raw form payloads into :class:`FormSnapshot` objects.

The UI hands over whatever its store currently holds, which may be a
half-hydrated draft. Nothing in here raises: absent, ``None`` or wrongly typed
values collapse to the unset sentinel of their field.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Tuple, TypeVar

from .models import (
    COLOR_FORMATS,
    CONTRIBUTOR_ROLES,
    RELEASE_TYPES,
    TITLE_STATUSES,
    TITLE_SUBTYPES,
    TITLE_TYPES,
    Assumption,
    Budget,
    CoreInfo,
    CreditsInfo,
    Director,
    Distributor,
    FormMeta,
    FormSnapshot,
    FormWarning,
    IdentityInfo,
    MajorCreditCounts,
    MandatoryInfo,
    MiscLink,
    OfficialSite,
    ProductionCompany,
    ProductionInfo,
    RecommendedInfoCounts,
    ReleaseDate,
)
from .utils import as_list, choice_field, field_value, generate_id, text_field

T = TypeVar("T")


def _count(payload: Any, *keys: str) -> int:
    value = field_value(payload, *keys)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _optional_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _rows(
    payload: Any,
    keys: Tuple[str, ...],
    prefix: str,
    build: Callable[[Mapping[str, Any]], T],
) -> Tuple[T, ...]:
    """Build every mapping row; rows without an id get one from their position."""

    rows = [row for row in as_list(field_value(payload, *keys)) if isinstance(row, Mapping)]
    return tuple(build(_with_id(row, prefix, index)) for index, row in enumerate(rows))


def _with_id(row: Mapping[str, Any], prefix: str, index: int) -> Mapping[str, Any]:
    if text_field(row, "id"):
        return row
    return {**row, "id": f"{prefix}_{index}"}


def _strings(payload: Any, *keys: str) -> Tuple[str, ...]:
    return tuple(item for item in as_list(field_value(payload, *keys)) if isinstance(item, str) and item)


def _row_id(row: Mapping[str, Any], prefix: str) -> str:
    return text_field(row, "id") or generate_id(prefix)


def release_date_from_dict(row: Mapping[str, Any]) -> ReleaseDate:
    return ReleaseDate(
        id=_row_id(row, "rd"),
        country=text_field(row, "country"),
        day=text_field(row, "day"),
        month=text_field(row, "month"),
        year=text_field(row, "year"),
        release_type=choice_field(row, RELEASE_TYPES, "releaseType", "release_type"),
        note=text_field(row, "note"),
    )


def misc_link_from_dict(row: Mapping[str, Any]) -> MiscLink:
    return MiscLink(id=_row_id(row, "ml"), label=text_field(row, "label"), url=text_field(row, "url"))


def director_from_dict(row: Mapping[str, Any]) -> Director:
    return Director(
        id=_row_id(row, "dir"),
        name=text_field(row, "name"),
        role=text_field(row, "role"),
        attribute=text_field(row, "attribute"),
    )


def _core(payload: Any) -> CoreInfo:
    return CoreInfo(
        title=text_field(payload, "title"),
        title_checked=field_value(payload, "titleChecked", "title_checked") is True,
        type=choice_field(payload, TITLE_TYPES, "type"),
        subtype=choice_field(payload, TITLE_SUBTYPES, "subtype"),
        status=choice_field(payload, TITLE_STATUSES, "status"),
        year=_optional_int(field_value(payload, "year")),
        contributor_role=choice_field(payload, CONTRIBUTOR_ROLES, "contributorRole", "contributor_role"),
    )


def _mandatory(payload: Any) -> MandatoryInfo:
    return MandatoryInfo(
        release_dates=_rows(payload, ("releaseDates", "release_dates"), "rd", release_date_from_dict),
        misc_links=_rows(payload, ("miscLinks", "misc_links"), "ml", misc_link_from_dict),
    )


def _identity(payload: Any) -> IdentityInfo:
    return IdentityInfo(
        countries_of_origin=_strings(payload, "countriesOfOrigin", "countries_of_origin"),
        languages=_strings(payload, "languages"),
        color_format=choice_field(payload, COLOR_FORMATS, "colorFormat", "color_format"),
        color_attribute=text_field(payload, "colorAttribute", "color_attribute"),
        genres=_strings(payload, "genres"),
    )


def _production(payload: Any) -> ProductionInfo:
    budget_raw = field_value(payload, "budget")
    budget = Budget(
        currency=text_field(budget_raw, "currency") if isinstance(budget_raw, Mapping) else "USD",
        amount=_optional_amount(field_value(budget_raw, "amount")),
    )
    return ProductionInfo(
        budget=budget,
        official_sites=_rows(
            payload,
            ("officialSites", "official_sites"),
            "site",
            lambda row: OfficialSite(
                id=_row_id(row, "site"),
                url=text_field(row, "url"),
                description=text_field(row, "description"),
            ),
        ),
        directors=_rows(payload, ("directors",), "dir", director_from_dict),
        distributors=_rows(
            payload,
            ("distributors",),
            "dist",
            lambda row: Distributor(
                id=_row_id(row, "dist"),
                company_name=text_field(row, "companyName", "company_name"),
                region=text_field(row, "region"),
                year=text_field(row, "year"),
                distribution_type=text_field(row, "distributionType", "distribution_type"),
                attribute=text_field(row, "attribute"),
            ),
        ),
        production_companies=_rows(
            payload,
            ("productionCompanies", "production_companies"),
            "co",
            lambda row: ProductionCompany(
                id=_row_id(row, "co"),
                company_name=text_field(row, "companyName", "company_name"),
                attribute=text_field(row, "attribute"),
            ),
        ),
    )


def _credits(payload: Any) -> CreditsInfo:
    major = field_value(payload, "majorCredits", "major_credits")
    info = field_value(payload, "recommendedInfo", "recommended_info")
    return CreditsInfo(
        major_credits=MajorCreditCounts(
            cast=_count(major, "cast"),
            self_credits=_count(major, "self", "self_credits"),
            writers=_count(major, "writers"),
            producers=_count(major, "producers"),
            composers=_count(major, "composers"),
            cinematographers=_count(major, "cinematographers"),
            editors=_count(major, "editors"),
        ),
        recommended_info=RecommendedInfoCounts(
            certificates=_count(info, "certificates"),
            running_times=_count(info, "runningTimes", "running_times"),
            filming_locations=_count(info, "filmingLocations", "filming_locations"),
            sound_mix=_count(info, "soundMix", "sound_mix"),
            aspect_ratio=_count(info, "aspectRatio", "aspect_ratio"),
            taglines=_count(info, "taglines"),
            plot_outlines=_count(info, "plotOutlines", "plot_outlines"),
            plot_summaries=_count(info, "plotSummaries", "plot_summaries"),
            keywords=_count(info, "keywords"),
            trivia=_count(info, "trivia"),
        ),
    )


def _meta(payload: Any) -> FormMeta:
    return FormMeta(
        confidence_score=_count(payload, "confidenceScore", "confidence_score"),
        warnings=_rows(
            payload,
            ("warnings",),
            "warn",
            lambda row: FormWarning(id=_row_id(row, "warn"), field=text_field(row, "field"), message=text_field(row, "message")),
        ),
        assumptions=_rows(
            payload,
            ("assumptions",),
            "assume",
            lambda row: Assumption(
                id=_row_id(row, "assume"),
                field=text_field(row, "field"),
                value=text_field(row, "value"),
                message=text_field(row, "message"),
            ),
        ),
    )


def snapshot_from_dict(payload: Any) -> FormSnapshot:
    """Build a snapshot from a (possibly partial) form-store dictionary."""

    return FormSnapshot(
        core=_core(field_value(payload, "core")),
        mandatory=_mandatory(field_value(payload, "mandatory")),
        identity=_identity(field_value(payload, "identity")),
        production=_production(field_value(payload, "production")),
        credits=_credits(field_value(payload, "credits")),
        meta=_meta(field_value(payload, "meta")),
    )
