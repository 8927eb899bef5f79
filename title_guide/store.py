"""In-memory form store backing the CLI and the tests."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, List

from .models import Assumption, FormSnapshot, MiscLink, ReleaseDate
from .signals import compute_confidence

logger = logging.getLogger(__name__)

Listener = Callable[[FormSnapshot], None]


class FormStore:
    """Holds the current snapshot; every mutation swaps in a new one.

    ``meta.confidence_score`` is recomputed after each mutation so readers of the
    stored snapshot always see a score consistent with its fields.
    """

    def __init__(self, snapshot: FormSnapshot | None = None) -> None:
        self._snapshot = self._with_confidence(snapshot or FormSnapshot())
        self._listeners: List[Listener] = []

    def snapshot(self) -> FormSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(self, snapshot: FormSnapshot) -> None:
        self._commit(snapshot)

    def update_core(self, **changes: Any) -> None:
        current = self._snapshot
        self._commit(replace(current, core=replace(current.core, **changes)))

    def add_release_date(self, row: ReleaseDate) -> None:
        current = self._snapshot
        mandatory = replace(current.mandatory, release_dates=current.mandatory.release_dates + (row,))
        self._commit(replace(current, mandatory=mandatory))

    def add_misc_link(self, row: MiscLink) -> None:
        current = self._snapshot
        mandatory = replace(current.mandatory, misc_links=current.mandatory.misc_links + (row,))
        self._commit(replace(current, mandatory=mandatory))

    def add_assumption(self, record: Assumption) -> None:
        current = self._snapshot
        meta = replace(current.meta, assumptions=current.meta.assumptions + (record,))
        self._commit(replace(current, meta=meta))

    def _commit(self, snapshot: FormSnapshot) -> None:
        snapshot = self._with_confidence(snapshot)
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        logger.debug("Form updated (confidence=%s)", snapshot.meta.confidence_score)
        for listener in list(self._listeners):
            listener(snapshot)

    @staticmethod
    def _with_confidence(snapshot: FormSnapshot) -> FormSnapshot:
        score = compute_confidence(snapshot)
        if snapshot.meta.confidence_score == score:
            return snapshot
        return replace(snapshot, meta=replace(snapshot.meta, confidence_score=score))
