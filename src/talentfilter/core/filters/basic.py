"""Personal attribute and salary predicates."""

from __future__ import annotations

from ...schemas import Candidate, FilterCriteria
from ..context import EvaluationContext
from ..normalize import key_set, normalize_key
from ..results import PredicateResult, evidence
from .common import CategoryFilter, threshold, within_bounds

BASIC_SUBJECT = "Basic Information"


class BasicInfoFilter(CategoryFilter):
    """City, status, source, personality and top-developer flags."""

    category = "basic"
    fields = (
        "cities",
        "exclude_cities",
        "statuses",
        "sources",
        "personality_types",
        "is_top_developer",
    )

    _MEMBERSHIP = (
        ("cities", "city", "city", "Location"),
        ("statuses", "status", "status", "Status"),
        ("sources", "source", "source", "Source"),
        ("personality_types", "personality_type", "personalityType", "Personality Type"),
    )

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []

        for field_name, attribute, type_, label in self._MEMBERSHIP:
            if not criteria.is_set(field_name):
                continue
            value = getattr(candidate, attribute)
            matched = normalize_key(value) in key_set(getattr(criteria, field_name))
            results.append(
                PredicateResult.of(
                    field_name,
                    matched,
                    [evidence(self.category, BASIC_SUBJECT, type_, label, [value])] if matched else [],
                )
            )

        if criteria.is_set("exclude_cities"):
            excluded = key_set(criteria.exclude_cities)
            results.append(
                PredicateResult.of("exclude_cities", normalize_key(candidate.city) not in excluded)
            )

        if criteria.is_top_developer is not None:
            matched = candidate.is_top_developer == criteria.is_top_developer
            found = []
            if matched and candidate.is_top_developer:
                found.append(evidence(self.category, BASIC_SUBJECT, "topDeveloper", "Top Developer", ["Yes"]))
            results.append(PredicateResult.of("is_top_developer", matched, found))

        return results


class SalaryFilter(CategoryFilter):
    """Current and expected salary bounds.

    Bounds that do not parse as numbers are ignored.
    """

    category = "basic"
    fields = (
        "current_salary_min",
        "current_salary_max",
        "expected_salary_min",
        "expected_salary_max",
    )

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        for prefix, label in (("current", "Current Salary"), ("expected", "Expected Salary")):
            salary = getattr(candidate, f"{prefix}_salary")
            outcome = within_bounds(
                salary,
                threshold(criteria, f"{prefix}_salary_min"),
                threshold(criteria, f"{prefix}_salary_max"),
            )
            if outcome is None:
                continue
            found = []
            if outcome:
                found.append(
                    evidence(self.category, BASIC_SUBJECT, "salary", label, [f"{salary:,.0f}"])
                )
            results.append(PredicateResult.of(f"{prefix}_salary", outcome, found))
        return results
