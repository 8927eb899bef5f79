"""Auto-fix registry: one-click form corrections described as commands.

The guidance engine never touches the form itself. An :class:`AutofixAction`
plans a tuple of commands from a snapshot; :func:`apply_autofix` hands those
commands to whatever implements :class:`FormMutations`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple, Union

from .intents import Intent
from .models import UNKNOWN_YEAR, Assumption, FormSnapshot, MiscLink, ReleaseDate
from .utils import timestamp_ms

logger = logging.getLogger(__name__)


class FormMutations(Protocol):
    """The only mutation capabilities the engine relies on."""

    def update_core(self, **changes: Any) -> None: ...

    def add_release_date(self, row: ReleaseDate) -> None: ...

    def add_misc_link(self, row: MiscLink) -> None: ...

    def add_assumption(self, record: Assumption) -> None: ...


@dataclass(slots=True, frozen=True)
class UpdateCore:
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class AddReleaseDate:
    row: ReleaseDate


@dataclass(slots=True, frozen=True)
class AddMiscLink:
    row: MiscLink


@dataclass(slots=True, frozen=True)
class AddAssumption:
    record: Assumption


FormCommand = Union[UpdateCore, AddReleaseDate, AddMiscLink, AddAssumption]
Planner = Callable[[FormSnapshot, int], Tuple[FormCommand, ...]]


@dataclass(slots=True, frozen=True)
class AutofixAction:
    label: str
    fix_id: str
    target_step: int
    planner: Planner

    def plan(self, snapshot: FormSnapshot, *, now_ms: Optional[int] = None) -> Tuple[FormCommand, ...]:
        return self.planner(snapshot, timestamp_ms() if now_ms is None else now_ms)


@dataclass(slots=True)
class AutofixOutcome:
    status: str
    fix_id: str
    commands: Tuple[FormCommand, ...] = ()
    detail: str = ""


def to_title_case(text: str) -> str:
    return re.sub(r"\b\w+", lambda m: m.group(0)[0].upper() + m.group(0)[1:], text)


def _capitalize_title(snapshot: FormSnapshot, now_ms: int) -> Tuple[FormCommand, ...]:
    return (UpdateCore({"title": to_title_case(snapshot.core.title)}),)


def _unknown_year(snapshot: FormSnapshot, now_ms: int) -> Tuple[FormCommand, ...]:
    return (
        UpdateCore({"year": UNKNOWN_YEAR}),
        AddAssumption(
            Assumption(
                id=f"autofix-year-{now_ms}",
                field="year",
                value="????",
                message="Year set to unknown (????) by editorial assistant",
            )
        ),
    )


def _empty_release_date(snapshot: FormSnapshot, now_ms: int) -> Tuple[FormCommand, ...]:
    return (AddReleaseDate(ReleaseDate(id=f"autofix-rd-{now_ms}")),)


def _empty_evidence_link(snapshot: FormSnapshot, now_ms: int) -> Tuple[FormCommand, ...]:
    return (AddMiscLink(MiscLink(id=f"autofix-ml-{now_ms}")),)


AUTOFIXES: Dict[Intent, AutofixAction] = {
    Intent.TITLE_CAPITALIZATION: AutofixAction("Capitalize title", "fix-title-cap", 0, _capitalize_title),
    Intent.YEAR_FORMAT: AutofixAction("Set year as unknown", "fix-unknown-year", 0, _unknown_year),
    Intent.MISSING_RELEASE_DATE: AutofixAction("Add release date", "fix-add-release-date", 1, _empty_release_date),
    Intent.MISSING_EVIDENCE: AutofixAction("Add evidence link", "fix-add-evidence", 1, _empty_evidence_link),
}


def get_autofix(intent: Intent | str) -> AutofixAction | None:
    """Return the auto-fix for ``intent``, or ``None`` when there is none."""

    try:
        key = Intent(intent)
    except ValueError:
        return None
    return AUTOFIXES.get(key)


def apply_commands(commands: Tuple[FormCommand, ...], store: FormMutations) -> None:
    for command in commands:
        if isinstance(command, UpdateCore):
            store.update_core(**dict(command.changes))
        elif isinstance(command, AddReleaseDate):
            store.add_release_date(command.row)
        elif isinstance(command, AddMiscLink):
            store.add_misc_link(command.row)
        elif isinstance(command, AddAssumption):
            store.add_assumption(command.record)
        else:
            raise TypeError(f"Unsupported form command: {command!r}")


def apply_autofix(
    action: AutofixAction,
    snapshot: FormSnapshot,
    store: FormMutations,
    *,
    now_ms: Optional[int] = None,
) -> AutofixOutcome:
    commands = action.plan(snapshot, now_ms=now_ms)
    apply_commands(commands, store)
    logger.info("Applied auto-fix %s (%d commands)", action.fix_id, len(commands))
    return AutofixOutcome(status="executed", fix_id=action.fix_id, commands=commands, detail=action.label)
