"""Employer attribute predicates joined by employer name."""

from __future__ import annotations

from typing import Callable

from ...schemas import Candidate, Employer, FilterCriteria, WorkExperience
from ..context import EvaluationContext
from ..normalize import key_set, matching_values
from ..results import Evidence, PredicateResult, evidence
from .common import CategoryFilter, record_key, threshold


def employer_size(employer: Employer) -> tuple[int, int]:
    """Summed ``(min, max)`` head count across all locations."""
    total_min = sum(location.min_size or 0 for location in employer.locations)
    total_max = sum(location.max_size or 0 for location in employer.locations)
    return total_min, total_max


def size_display(employer: Employer) -> str:
    total_min, total_max = employer_size(employer)
    if total_min == total_max:
        return f"{total_min}"
    return f"{total_min}-{total_max}"


class EmployerFilter(CategoryFilter):
    """Employer name, status, location, salary policy and size.

    Each field is satisfied by any experience whose employer resolves and
    matches; unresolved employers never satisfy attribute fields.
    """

    category = "employers"
    fields = (
        "employers",
        "employer_status",
        "employer_countries",
        "employer_cities",
        "employer_salary_policies",
        "employer_size_min",
        "employer_size_max",
    )

    _ATTRIBUTES: tuple[tuple[str, str, str, Callable[[Employer], list[str | None]]], ...] = (
        ("employer_status", "status", "Employer Status", lambda employer: [employer.status]),
        (
            "employer_countries",
            "country",
            "Country",
            lambda employer: [location.country for location in employer.locations],
        ),
        (
            "employer_cities",
            "city",
            "City",
            lambda employer: [location.city for location in employer.locations],
        ),
        (
            "employer_salary_policies",
            "salaryPolicy",
            "Salary Policy",
            lambda employer: [location.salary_policy for location in employer.locations],
        ),
    )

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []

        if criteria.is_set("employers"):
            selected = key_set(criteria.employers)
            found = [
                self._evidence(candidate, exp, "employer", "Employer", [exp.employer_name])
                for exp in candidate.work_experiences
                if matching_values([exp.employer_name], selected)
            ]
            results.append(PredicateResult.of("employers", bool(found), found))

        for field_name, type_, label, extract in self._ATTRIBUTES:
            if not criteria.is_set(field_name):
                continue
            selected = key_set(getattr(criteria, field_name))
            found: list[Evidence] = []
            for experience in candidate.work_experiences:
                employer = context.reference.employer(experience.employer_name)
                if employer is None:
                    continue
                values = list(dict.fromkeys(matching_values(extract(employer), selected)))
                if values:
                    found.append(self._evidence(candidate, experience, type_, label, values))
            results.append(PredicateResult.of(field_name, bool(found), found))

        size_result = self._size(candidate, criteria, context)
        if size_result is not None:
            results.append(size_result)
        return results

    def _size(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult | None:
        low = threshold(criteria, "employer_size_min")
        high = threshold(criteria, "employer_size_max")
        if low is None and high is None:
            return None
        low = low if low is not None else 0.0
        high = high if high is not None else float("inf")

        found: list[Evidence] = []
        for experience in candidate.work_experiences:
            employer = context.reference.employer(experience.employer_name)
            if employer is None:
                continue
            total_min, total_max = employer_size(employer)
            if total_max >= low and total_min <= high:
                found.append(
                    self._evidence(
                        candidate,
                        experience,
                        "size",
                        "Company Size",
                        [f"{size_display(employer)} employees"],
                    )
                )
        return PredicateResult.of("employer_size", bool(found), found)

    def _evidence(
        self,
        candidate: Candidate,
        experience: WorkExperience,
        type_: str,
        label: str,
        values: list[str],
    ) -> Evidence:
        return evidence(
            self.category,
            experience.employer_name,
            type_,
            label,
            values,
            key=record_key(experience, candidate.work_experiences),
            job_title=experience.job_title,
            start_date=experience.start_date,
            end_date=experience.end_date,
        )
