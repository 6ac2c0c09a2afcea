"""Shared building blocks for predicate categories."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterator, Sequence

import structlog
from pydantic import BaseModel

from ...schemas import Candidate, FilterCriteria, Project, ProjectReference, WorkExperience
from ..context import EvaluationContext
from ..normalize import normalize_key, parse_number
from ..results import CategoryType, Evidence, PredicateResult, evidence

logger = structlog.get_logger(__name__)


class CategoryFilter:
    """One predicate category; inactive when all of its fields are empty."""

    category: CategoryType
    fields: tuple[str, ...] = ()

    def is_active(self, criteria: FilterCriteria) -> bool:
        return criteria.any_set(*self.fields)

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        raise NotImplementedError


def threshold(criteria: BaseModel, name: str) -> float | None:
    raw = getattr(criteria, name)
    value = parse_number(raw)
    if value is None and raw and str(raw).strip():
        logger.debug("criteria.unparseable_number", field=name, value=raw)
    return value


def within_bounds(value: float | None, low: float | None, high: float | None) -> bool | None:
    """``None`` when neither bound applies, else whether ``value`` fits."""
    if low is None and high is None:
        return None
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def experience_label(experience: WorkExperience) -> str:
    if experience.job_title:
        return f"{experience.employer_name} - {experience.job_title}"
    return experience.employer_name


def experience_context(experience: WorkExperience) -> dict:
    return {
        "employer_name": experience.employer_name,
        "job_title": experience.job_title,
        "start_date": experience.start_date,
        "end_date": experience.end_date,
    }


def record_key(record: BaseModel, records: Sequence[BaseModel]) -> str:
    """Key of one candidate record: its id, else its list position."""
    record_id = getattr(record, "id", "")
    if record_id:
        return record_id
    index = next((i for i, item in enumerate(records) if item is record), -1)
    return f"#{index}"


def experience_evidence(
    category: CategoryType,
    candidate: Candidate,
    experience: WorkExperience,
    type_: str,
    label: str,
    values: Any,
) -> Evidence:
    return evidence(
        category,
        experience_label(experience),
        type_,
        label,
        values,
        key=record_key(experience, candidate.work_experiences),
        **experience_context(experience),
    )


def title_matches(title: str | None, selected: set[str]) -> bool:
    normalized = normalize_key(title)
    return bool(normalized) and any(choice in normalized for choice in selected)


def iter_project_refs(
    candidate: Candidate,
    *,
    include_standalone: bool = True,
) -> Iterator[tuple[WorkExperience | None, ProjectReference]]:
    for experience in candidate.work_experiences:
        for reference in experience.projects:
            yield experience, reference
    if include_standalone:
        for reference in candidate.projects:
            yield None, reference


def resolve_projects(
    references: Iterator[tuple[WorkExperience | None, ProjectReference]],
    context: EvaluationContext,
) -> list[Project]:
    """Canonical projects for the given references, deduplicated by name."""
    resolved: dict[str, Project] = {}
    for _, reference in references:
        project = context.reference.project(reference.project_name)
        if project is not None:
            resolved.setdefault(normalize_key(project.project_name), project)
    return list(resolved.values())


def in_date_window(
    start: date | None,
    end: date | None,
    lower: date | None,
    upper: date | None,
) -> bool:
    """Three-way activity window check for a dated record.

    Both bounds: inclusive overlap; lower only: starts on/after ``lower``;
    upper only: ends on/before ``upper``. A record without an end is
    treated as active when it starts on/before ``upper``.
    """
    if lower is not None and upper is not None:
        if start is None:
            return False
        if end is None:
            return start <= upper
        return start <= upper and end >= lower
    if lower is not None:
        return start is not None and start >= lower
    if upper is not None:
        if end is None:
            return start is not None and start <= upper
        return end <= upper
    return True
