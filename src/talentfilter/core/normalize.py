"""Normalization helpers for name-keyed joins and free-text thresholds."""

from __future__ import annotations

import math
from typing import Iterable


def normalize_key(value: str | None) -> str:
    return (value or "").strip().lower()


def key_set(values: Iterable[str | None]) -> set[str]:
    """Normalized, non-empty keys for a filter selection."""
    return {key for key in (normalize_key(value) for value in values) if key}


def contains_key(values: Iterable[str | None], selected: set[str]) -> bool:
    return any(normalize_key(value) in selected for value in values)


def matching_values(values: Iterable[str | None], selected: set[str]) -> list[str]:
    """Return the original spellings from ``values`` that hit ``selected``."""
    return [value for value in values if value and normalize_key(value) in selected]


def parse_number(value: str | float | int | None) -> float | None:
    """Lenient numeric parse; ``None`` means the threshold is not applicable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = value.strip().replace(",", "")
    if not text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def parse_team_size(value: str | None) -> tuple[int, int] | None:
    """Parse ``"N"`` or ``"N-M"`` into an inclusive ``(min, max)`` pair."""
    if not value:
        return None
    parts = [part.strip() for part in value.strip().split("-")]
    if len(parts) not in (1, 2) or not all(part.isdigit() for part in parts):
        return None
    low = int(parts[0])
    high = int(parts[-1])
    return low, high
