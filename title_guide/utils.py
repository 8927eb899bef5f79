"""Utilities supporting the guidance engine modules."""

from __future__ import annotations

import random
import string
import time
from typing import Any, Iterable, List, Mapping, Sequence


_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str, *, size: int = 8) -> str:
    """Generate a short unique identifier with a readable prefix."""

    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(size))
    return f"{prefix}_{suffix}"


def timestamp_ms() -> int:
    """Return current UTC timestamp in milliseconds."""

    return int(time.time() * 1000)


def choose_index(rng: Any, size: int, *, exclude: int = -1) -> int:
    """Draw a uniform index in ``range(size)``, skipping ``exclude`` when possible.

    Candidates are built up front so a single draw is always enough, which keeps
    scripted random sources in tests predictable.
    """

    if size <= 0:
        raise ValueError("size must be positive")
    candidates = [idx for idx in range(size) if idx != exclude or size == 1]
    return candidates[rng.randrange(len(candidates))]


def as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def dedupe_append(existing: Iterable[str], incoming: Iterable[Any]) -> List[str]:
    """Append non-empty strings from ``incoming`` that are not already present."""

    merged = list(existing)
    seen = set(merged)
    for item in incoming:
        if isinstance(item, str) and item and item not in seen:
            merged.append(item)
            seen.add(item)
    return merged


def field_value(payload: Any, *keys: str) -> Any:
    """Return the value of the first of ``keys`` present in a mapping payload."""

    if not isinstance(payload, Mapping):
        return None
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def text_field(payload: Any, *keys: str) -> str:
    value = field_value(payload, *keys)
    return value if isinstance(value, str) else ""


def choice_field(payload: Any, allowed: Sequence[str], *keys: str) -> str:
    value = text_field(payload, *keys)
    return value if value in allowed else ""
