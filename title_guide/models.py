"""Data models for the new-title submission form and the guidance it produces."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, Optional, Tuple


TITLE_TYPES = ("film", "madeForTv", "madeForVideo", "musicVideo", "podcastSeries", "videoGame")
TITLE_SUBTYPES = ("featureLength", "shortSubject")
TITLE_STATUSES = ("released", "limitedScreenings", "completedNotShown", "notComplete")
CONTRIBUTOR_ROLES = ("producerDirectorWriter", "castCrew", "publicist", "noneOfAbove")
COLOR_FORMATS = ("color", "blackAndWhite")
RELEASE_TYPES = ("theatrical", "digital", "physical", "tv", "festival")

# Sentinel written into ``year`` by the unknown-year auto-fix.
UNKNOWN_YEAR = 9999


@dataclass(slots=True, frozen=True)
class ReleaseDate:
    id: str
    country: str = ""
    day: str = ""
    month: str = ""
    year: str = ""
    release_type: str = ""
    note: str = ""


@dataclass(slots=True, frozen=True)
class MiscLink:
    id: str
    label: str = ""
    url: str = ""


@dataclass(slots=True, frozen=True)
class OfficialSite:
    id: str
    url: str = ""
    description: str = ""


@dataclass(slots=True, frozen=True)
class Director:
    id: str
    name: str = ""
    role: str = ""
    attribute: str = ""


@dataclass(slots=True, frozen=True)
class Distributor:
    id: str
    company_name: str = ""
    region: str = ""
    year: str = ""
    distribution_type: str = ""
    attribute: str = ""


@dataclass(slots=True, frozen=True)
class ProductionCompany:
    id: str
    company_name: str = ""
    attribute: str = ""


@dataclass(slots=True, frozen=True)
class FormWarning:
    id: str
    field: str
    message: str


@dataclass(slots=True, frozen=True)
class Assumption:
    """A value the assistant or the voice parser filled in on the user's behalf."""

    id: str
    field: str
    value: str
    message: str


@dataclass(slots=True, frozen=True)
class Budget:
    currency: str = "USD"
    amount: Optional[float] = None


@dataclass(slots=True, frozen=True)
class MajorCreditCounts:
    cast: int = 0
    self_credits: int = 0
    writers: int = 0
    producers: int = 0
    composers: int = 0
    cinematographers: int = 0
    editors: int = 0

    def filled_count(self) -> int:
        return sum(1 for f in fields(self) if (getattr(self, f.name) or 0) > 0)


@dataclass(slots=True, frozen=True)
class RecommendedInfoCounts:
    certificates: int = 0
    running_times: int = 0
    filming_locations: int = 0
    sound_mix: int = 0
    aspect_ratio: int = 0
    taglines: int = 0
    plot_outlines: int = 0
    plot_summaries: int = 0
    keywords: int = 0
    trivia: int = 0

    def any_filled(self) -> bool:
        return any((getattr(self, f.name) or 0) > 0 for f in fields(self))


@dataclass(slots=True, frozen=True)
class CoreInfo:
    """Step 0: identity of the title and of the person submitting it."""

    title: str = ""
    title_checked: bool = False
    type: str = ""
    subtype: str = ""
    status: str = ""
    year: Optional[int] = None
    contributor_role: str = ""


@dataclass(slots=True, frozen=True)
class MandatoryInfo:
    """Step 1: evidence every submission must carry."""

    release_dates: Tuple[ReleaseDate, ...] = ()
    misc_links: Tuple[MiscLink, ...] = ()


@dataclass(slots=True, frozen=True)
class IdentityInfo:
    countries_of_origin: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()
    color_format: str = ""
    color_attribute: str = ""
    genres: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class ProductionInfo:
    budget: Budget = field(default_factory=Budget)
    official_sites: Tuple[OfficialSite, ...] = ()
    directors: Tuple[Director, ...] = ()
    distributors: Tuple[Distributor, ...] = ()
    production_companies: Tuple[ProductionCompany, ...] = ()


@dataclass(slots=True, frozen=True)
class CreditsInfo:
    major_credits: MajorCreditCounts = field(default_factory=MajorCreditCounts)
    recommended_info: RecommendedInfoCounts = field(default_factory=RecommendedInfoCounts)


@dataclass(slots=True, frozen=True)
class FormMeta:
    confidence_score: int = 0
    warnings: Tuple[FormWarning, ...] = ()
    assumptions: Tuple[Assumption, ...] = ()


@dataclass(slots=True, frozen=True)
class FormSnapshot:
    """Read-only view of the whole in-progress submission at one instant."""

    core: CoreInfo = field(default_factory=CoreInfo)
    mandatory: MandatoryInfo = field(default_factory=MandatoryInfo)
    identity: IdentityInfo = field(default_factory=IdentityInfo)
    production: ProductionInfo = field(default_factory=ProductionInfo)
    credits: CreditsInfo = field(default_factory=CreditsInfo)
    meta: FormMeta = field(default_factory=FormMeta)

    def step_slice(self, step: int) -> object:
        """Return the part of the form edited on wizard ``step``."""

        slices = (self.core, self.mandatory, self.identity, self.production, self.credits)
        if 0 <= step < len(slices):
            return slices[step]
        return self.core


@dataclass(slots=True, frozen=True)
class FormSignals:
    """Boolean predicates derived from a snapshot on every evaluation."""

    missing_evidence: bool
    missing_release_date: bool
    year_invalid: bool
    title_lowercase: bool
    type_subtype_mismatch: bool
    credits_incomplete: bool
    title_missing: bool
    type_missing: bool
    status_missing: bool
    role_missing: bool
    countries_missing: bool
    languages_missing: bool
    genres_missing: bool
    budget_missing: bool

    def as_dict(self) -> Dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(slots=True, frozen=True)
class FieldTip:
    """Inline hint shown next to one form field."""

    primary_tip: str
    severity: str = "info"
    secondary_tip: Optional[str] = None
