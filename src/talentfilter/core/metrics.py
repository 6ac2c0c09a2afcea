"""Derived work-history metrics.

Durations use the business approximation
``(years * 12) + months + days / 30`` per experience rather than an exact
day count, so figures line up with existing reports.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date
from typing import Any, Callable, Iterable

import pendulum

from ..schemas import Candidate, WorkExperience
from .normalize import normalize_key

DAYS_PER_YEAR = 365.25


def today() -> date:
    current = pendulum.today()
    return date(current.year, current.month, current.day)


def round_one(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def approximate_months(start: date, end: date) -> float:
    return (
        (end.year - start.year) * 12
        + (end.month - start.month)
        + (end.day - start.day) / 30
    )


def _sum_years(experiences: Iterable[WorkExperience], as_of: date) -> float:
    total_months = 0.0
    for experience in experiences:
        if experience.start_date is None:
            continue
        months = approximate_months(experience.start_date, experience.end_date or as_of)
        if months > 0:
            total_months += months
    return round_one(total_months / 12)


def tech_stack_years(candidate: Candidate, tech: str, *, as_of: date | None = None) -> float:
    """Years spent in experiences listing ``tech`` (case-insensitive)."""
    target = normalize_key(tech)
    matching = (
        experience
        for experience in candidate.work_experiences
        if any(normalize_key(stack) == target for stack in experience.tech_stacks)
    )
    return _sum_years(matching, as_of or today())


def work_mode_years(candidate: Candidate, mode: str, *, as_of: date | None = None) -> float:
    target = mode.strip()
    matching = (
        experience
        for experience in candidate.work_experiences
        if (experience.work_mode or "").strip() == target
    )
    return _sum_years(matching, as_of or today())


def years_of_experience(candidate: Candidate, *, as_of: date | None = None) -> float:
    return _sum_years(candidate.work_experiences, as_of or today())


def average_tenure(candidate: Candidate, *, as_of: date | None = None) -> float:
    """Mean years per employer, merging repeated stints at the same employer."""
    as_of = as_of or today()
    groups: dict[str, list[WorkExperience]] = defaultdict(list)
    for experience in candidate.work_experiences:
        groups[normalize_key(experience.employer_name)].append(experience)

    tenures: list[float] = []
    for experiences in groups.values():
        starts = [exp.start_date for exp in experiences if exp.start_date is not None]
        if not starts:
            continue
        earliest = min(starts)
        latest = max(exp.end_date or as_of for exp in experiences)
        years = (latest.toordinal() - earliest.toordinal()) / DAYS_PER_YEAR
        if years > 0:
            tenures.append(years)

    if not tenures:
        return 0.0
    return round_one(sum(tenures) / len(tenures))


def career_timeline(candidate: Candidate) -> list[WorkExperience]:
    """Dated experiences ordered by start date."""
    return sorted(
        (exp for exp in candidate.work_experiences if exp.start_date is not None),
        key=lambda exp: exp.start_date,
    )


def promotion_window_start(as_of: date, years: float) -> date:
    anchor = pendulum.date(as_of.year, as_of.month, as_of.day)
    if float(years).is_integer():
        shifted = anchor.subtract(years=int(years))
    else:
        shifted = anchor.subtract(days=round(years * DAYS_PER_YEAR))
    return date(shifted.year, shifted.month, shifted.day)


def promotions_in_last_years(
    candidate: Candidate,
    years: float,
    *,
    as_of: date | None = None,
) -> int:
    """Count title changes between consecutive experiences inside the window.

    The timeline is scanned as a whole, not per employer.
    """
    as_of = as_of or today()
    dated = career_timeline(candidate)
    if len(dated) < 2:
        return 0

    window_start = promotion_window_start(as_of, years)
    count = 0
    for previous, current in zip(dated, dated[1:]):
        previous_title = normalize_key(previous.job_title)
        current_title = normalize_key(current.job_title)
        if not previous_title or not current_title or previous_title == current_title:
            continue
        if window_start <= current.start_date <= as_of:
            count += 1
    return count


def promotions_same_company(candidate: Candidate) -> int:
    """Title changes between consecutive stints at the same employer."""
    by_employer: dict[str, list[WorkExperience]] = defaultdict(list)
    for experience in career_timeline(candidate):
        employer = normalize_key(experience.employer_name)
        if employer:
            by_employer[employer].append(experience)

    count = 0
    for experiences in by_employer.values():
        for previous, current in zip(experiences, experiences[1:]):
            previous_title = normalize_key(previous.job_title)
            current_title = normalize_key(current.job_title)
            if previous_title and current_title and previous_title != current_title:
                count += 1
    return count


def job_changes(
    candidate: Candidate,
    years: float | None = None,
    *,
    as_of: date | None = None,
) -> int:
    """Count employer switches between consecutive experiences.

    With ``years`` only switches whose new role starts inside the trailing
    window are counted; without it the whole career is scanned.
    """
    as_of = as_of or today()
    dated = career_timeline(candidate)
    window_start = promotion_window_start(as_of, years) if years else None
    count = 0
    for previous, current in zip(dated, dated[1:]):
        if normalize_key(previous.employer_name) == normalize_key(current.employer_name):
            continue
        if window_start is not None and not window_start <= current.start_date <= as_of:
            continue
        count += 1
    return count


def longest_employment_gap(candidate: Candidate, *, as_of: date | None = None) -> float | None:
    """Longest break between jobs in approximate months, ``None`` without dated work.

    Overlapping experiences extend the covered period; the time after the
    last job is not a gap.
    """
    as_of = as_of or today()
    dated = career_timeline(candidate)
    if not dated:
        return None
    longest = 0.0
    covered_until = dated[0].end_date or as_of
    for experience in dated[1:]:
        if experience.start_date > covered_until:
            longest = max(longest, approximate_months(covered_until, experience.start_date))
        covered_until = max(covered_until, experience.end_date or as_of)
    return round_one(longest)


class MetricsCache:
    """Per-pass memo of derived metrics.

    Entries are keyed by candidate object identity, so two records sharing
    an id never share figures. Valid only while the snapshot it was built
    for is alive and unchanged.
    """

    def __init__(self, as_of: date) -> None:
        self.as_of = as_of
        self._values: dict[tuple[int, str, Any], Any] = {}

    def _get(self, candidate: Candidate, metric: str, argument: Any, compute: Callable[[], Any]) -> Any:
        key = (id(candidate), metric, argument)
        if key not in self._values:
            self._values[key] = compute()
        return self._values[key]

    def tech_stack_years(self, candidate: Candidate, tech: str) -> float:
        return self._get(
            candidate,
            "tech_stack_years",
            normalize_key(tech),
            lambda: tech_stack_years(candidate, tech, as_of=self.as_of),
        )

    def work_mode_years(self, candidate: Candidate, mode: str) -> float:
        return self._get(
            candidate,
            "work_mode_years",
            mode.strip(),
            lambda: work_mode_years(candidate, mode, as_of=self.as_of),
        )

    def years_of_experience(self, candidate: Candidate) -> float:
        return self._get(
            candidate,
            "years_of_experience",
            None,
            lambda: years_of_experience(candidate, as_of=self.as_of),
        )

    def average_tenure(self, candidate: Candidate) -> float:
        return self._get(
            candidate,
            "average_tenure",
            None,
            lambda: average_tenure(candidate, as_of=self.as_of),
        )

    def promotions(self, candidate: Candidate, years: float) -> int:
        return self._get(
            candidate,
            "promotions",
            years,
            lambda: promotions_in_last_years(candidate, years, as_of=self.as_of),
        )

    def promotions_same_company(self, candidate: Candidate) -> int:
        return self._get(
            candidate,
            "promotions_same_company",
            None,
            lambda: promotions_same_company(candidate),
        )

    def job_changes(self, candidate: Candidate, years: float | None) -> int:
        return self._get(
            candidate,
            "job_changes",
            years,
            lambda: job_changes(candidate, years, as_of=self.as_of),
        )

    def longest_employment_gap(self, candidate: Candidate) -> float | None:
        return self._get(
            candidate,
            "longest_employment_gap",
            None,
            lambda: longest_employment_gap(candidate, as_of=self.as_of),
        )
