"""Evaluation context shared by every predicate in one pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from functools import cached_property
from typing import Any, Sequence

import pendulum
import structlog

from ..schemas import Candidate, DatasetSnapshot
from .metrics import MetricsCache, today
from .reference import ReferenceData

logger = structlog.get_logger(__name__)


@dataclass
class EngineSettings:
    """Engine-wide defaults that criteria do not carry themselves."""

    collaboration_tolerance_days: int | None = 30
    promotion_window_years: int = 5
    home_employer: str = "DPL"
    connection_tolerance_months: float = 0.0


def resolve_as_of(value: Any) -> date:
    """Resolve a reference date from ``None``, a date or an ISO string."""
    if value is None:
        return today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    text = str(value).strip()
    try:
        if len(text) == 7 and text[4] == "-":
            return date(int(text[:4]), int(text[5:7]), 1)
        parsed = pendulum.parse(text)
    except ValueError:
        parsed = None
    if not isinstance(parsed, (pendulum.Date, pendulum.DateTime)):
        logger.warning("as_of.unparseable", value=text)
        return today()
    return date(parsed.year, parsed.month, parsed.day)


@dataclass
class EvaluationContext:
    """Immutable inputs for one evaluation pass plus its metric memo."""

    reference: ReferenceData
    candidates: Sequence[Candidate] = ()
    as_of: date = field(default_factory=today)
    settings: EngineSettings = field(default_factory=EngineSettings)

    def __post_init__(self) -> None:
        self.metrics = MetricsCache(self.as_of)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: DatasetSnapshot,
        *,
        as_of: Any = None,
        settings: EngineSettings | None = None,
    ) -> "EvaluationContext":
        return cls(
            reference=ReferenceData.from_snapshot(snapshot),
            candidates=snapshot.candidates,
            as_of=resolve_as_of(as_of),
            settings=settings or EngineSettings(),
        )

    @cached_property
    def top_developers(self) -> list[Candidate]:
        return [candidate for candidate in self.candidates if candidate.is_top_developer]
