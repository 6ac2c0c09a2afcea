"""Work-history predicates: current role scoping, transitions and derived metrics."""

from __future__ import annotations

from typing import Callable

from ...schemas import Candidate, FilterCriteria, WorkExperience
from ..context import EvaluationContext
from ..metrics import career_timeline
from ..normalize import key_set, matching_values, normalize_key
from ..results import Evidence, PredicateResult, evidence
from .common import (
    CategoryFilter,
    experience_evidence,
    threshold,
    title_matches,
    within_bounds,
)

CAREER_SUBJECT = "Career Summary"

# (criteria field, criterion type, label)
SCOPED_FIELDS = (
    ("shift_types", "shiftType", "Shift Type"),
    ("work_modes", "workMode", "Work Mode"),
    ("time_support_zones", "timeSupportZone", "Time Support Zone"),
    ("employer_types", "employerType", "Employer Type"),
)


class WorkHistoryFilter(CategoryFilter):
    """Predicates over a candidate's employment timeline."""

    category = "experience"
    fields = (
        "job_titles",
        "is_currently_working",
        "shift_types",
        "work_modes",
        "time_support_zones",
        "employer_types",
        "career_transition",
        "work_mode_min_years",
        "min_years_of_experience",
        "max_years_of_experience",
        "min_average_tenure",
        "max_average_tenure",
        "min_promotions",
        "min_promotions_same_company",
        "max_job_changes",
        "continuous_employment",
    )

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []

        if criteria.is_set("job_titles"):
            results.append(self._job_titles(candidate, criteria))

        if criteria.is_currently_working is True:
            results.append(self._current_role(candidate, criteria, context))
        else:
            if criteria.is_currently_working is False:
                ongoing = [exp for exp in candidate.work_experiences if exp.is_ongoing]
                results.append(PredicateResult.of("is_currently_working", not ongoing))
            for field_name, type_, label in SCOPED_FIELDS:
                if criteria.is_set(field_name):
                    results.append(
                        self._any_experience(candidate, criteria, context, field_name, type_, label)
                    )

        if criteria.career_transition.is_active:
            results.append(self._career_transition(candidate, criteria, context))

        if criteria.work_mode_min_years.is_active:
            result = self._work_mode_years(candidate, criteria, context)
            if result is not None:
                results.append(result)

        results.extend(
            result
            for result in (
                self._metric_bounds(
                    candidate,
                    criteria,
                    "years_of_experience",
                    "yearsOfExperience",
                    "Years of Experience",
                    context.metrics.years_of_experience,
                ),
                self._metric_bounds(
                    candidate,
                    criteria,
                    "average_tenure",
                    "averageTenure",
                    "Average Tenure",
                    context.metrics.average_tenure,
                ),
                self._promotions(candidate, criteria, context),
                self._promotions_same_company(candidate, criteria, context),
                self._job_changes(candidate, criteria, context),
                self._continuous_employment(candidate, criteria, context),
            )
            if result is not None
        )
        return results

    def _job_titles(self, candidate: Candidate, criteria: FilterCriteria) -> PredicateResult:
        selected = key_set(criteria.job_titles)
        experiences = candidate.work_experiences
        if criteria.job_title_started_career:
            experiences = career_timeline(candidate)[:1]
        found = [
            experience_evidence(self.category, candidate, exp, "jobTitle", "Job Title", [exp.job_title])
            for exp in experiences
            if title_matches(exp.job_title, selected)
        ]
        return PredicateResult.of("job_titles", bool(found), found)

    def _field_values(
        self,
        experience: WorkExperience,
        field_name: str,
        context: EvaluationContext,
    ) -> list[str]:
        if field_name == "shift_types":
            return [experience.shift_type] if experience.shift_type else []
        if field_name == "work_modes":
            return [experience.work_mode] if experience.work_mode else []
        if field_name == "time_support_zones":
            return list(experience.time_support_zones)
        employer = context.reference.employer(experience.employer_name)
        if employer is None or not employer.employer_type:
            return []
        return [employer.employer_type]

    def _current_role(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult:
        """All scoped sub-filters must hold on the same ongoing experience."""
        active = [scoped for scoped in SCOPED_FIELDS if criteria.is_set(scoped[0])]
        found: list[Evidence] = []
        matched = False
        for experience in candidate.work_experiences:
            if not experience.is_ongoing:
                continue
            hits: list[tuple[str, str, list[str]]] = []
            for field_name, type_, label in active:
                values = matching_values(
                    self._field_values(experience, field_name, context),
                    key_set(getattr(criteria, field_name)),
                )
                if not values:
                    break
                hits.append((type_, label, values))
            else:
                matched = True
                found.append(
                    experience_evidence(
                        self.category, candidate, experience, "currentlyWorking", "Currently Working", ["Yes"]
                    )
                )
                found.extend(
                    experience_evidence(self.category, candidate, experience, type_, label, values)
                    for type_, label, values in hits
                )
        return PredicateResult.of("is_currently_working", matched, found)

    def _any_experience(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
        field_name: str,
        type_: str,
        label: str,
    ) -> PredicateResult:
        selected = key_set(getattr(criteria, field_name))
        found: list[Evidence] = []
        for experience in candidate.work_experiences:
            values = matching_values(self._field_values(experience, field_name, context), selected)
            if values:
                found.append(
                    experience_evidence(self.category, candidate, experience, type_, label, values)
                )
        return PredicateResult.of(field_name, bool(found), found)

    def _career_transition(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult:
        transition = criteria.career_transition
        from_types = key_set(transition.from_types)
        to_types = key_set(transition.to_types)

        timeline: list[tuple[WorkExperience, str]] = []
        for experience in career_timeline(candidate):
            employer = context.reference.employer(experience.employer_name)
            if employer is not None and employer.employer_type:
                timeline.append((experience, employer.employer_type))

        origin = next(
            (index for index, (_, kind) in enumerate(timeline) if normalize_key(kind) in from_types),
            None,
        )
        if origin is None:
            return PredicateResult.of("career_transition", False)
        target = next(
            (
                index
                for index in range(origin + 1, len(timeline))
                if normalize_key(timeline[index][1]) in to_types
            ),
            None,
        )
        if target is None:
            return PredicateResult.of("career_transition", False)

        experience, to_kind = timeline[target]
        if transition.require_current and (
            target != len(timeline) - 1 or not experience.is_ongoing
        ):
            return PredicateResult.of("career_transition", False)

        from_kind = timeline[origin][1]
        return PredicateResult.of(
            "career_transition",
            True,
            [
                experience_evidence(
                    self.category,
                    candidate,
                    experience,
                    "careerTransition",
                    "Career Transition",
                    [f"{from_kind} -> {to_kind}"],
                )
            ],
        )

    def _work_mode_years(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult | None:
        requirement = criteria.work_mode_min_years
        min_years = threshold(requirement, "min_years")
        if min_years is None:
            return None
        reached = []
        for mode in requirement.work_modes:
            if not mode or not mode.strip():
                continue
            years = context.metrics.work_mode_years(candidate, mode)
            if years >= min_years:
                reached.append(f"{mode.strip()}: {years} yrs")
        found = [
            evidence(self.category, CAREER_SUBJECT, "workModeYears", "Work Mode Experience", reached)
        ] if reached else []
        return PredicateResult.of("work_mode_min_years", bool(reached), found)

    def _metric_bounds(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        metric: str,
        type_: str,
        label: str,
        compute: Callable[[Candidate], float],
    ) -> PredicateResult | None:
        low = threshold(criteria, f"min_{metric}")
        high = threshold(criteria, f"max_{metric}")
        if low is None and high is None:
            return None
        value = compute(candidate)
        matched = bool(within_bounds(value, low, high))
        found = [evidence(self.category, CAREER_SUBJECT, type_, label, [f"{value} yrs"])] if matched else []
        return PredicateResult.of(metric, matched, found)

    def _promotions(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult | None:
        minimum = threshold(criteria, "min_promotions")
        if minimum is None:
            return None
        window = threshold(criteria, "promotion_window_years")
        if window is None or window <= 0:
            window = float(context.settings.promotion_window_years)
        count = context.metrics.promotions(candidate, window)
        matched = count >= minimum
        found = [
            evidence(
                self.category,
                CAREER_SUBJECT,
                "promotions",
                "Promotions",
                [f"{count} in last {window:g} years"],
            )
        ] if matched else []
        return PredicateResult.of("promotions", matched, found)

    def _promotions_same_company(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult | None:
        minimum = threshold(criteria, "min_promotions_same_company")
        if minimum is None:
            return None
        count = context.metrics.promotions_same_company(candidate)
        matched = count >= minimum
        found = [
            evidence(
                self.category,
                CAREER_SUBJECT,
                "promotionsSameCompany",
                "Promotions Within Employer",
                [str(count)],
            )
        ] if matched else []
        return PredicateResult.of("promotions_same_company", matched, found)

    def _job_changes(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult | None:
        maximum = threshold(criteria, "max_job_changes")
        if maximum is None:
            return None
        window = threshold(criteria, "job_change_window_years")
        if window is not None and window <= 0:
            window = None
        count = context.metrics.job_changes(candidate, window)
        matched = count <= maximum
        period = f"in last {window:g} years" if window is not None else "overall"
        found = [
            evidence(self.category, CAREER_SUBJECT, "jobChanges", "Job Changes", [f"{count} {period}"])
        ] if matched else []
        return PredicateResult.of("job_changes", matched, found)

    def _continuous_employment(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult | None:
        wanted = criteria.continuous_employment
        if wanted is None:
            return None
        gap = context.metrics.longest_employment_gap(candidate)
        if gap is None:
            return PredicateResult.of("continuous_employment", False)
        continuous = gap <= criteria.continuous_employment_tolerance_months
        if not wanted:
            return PredicateResult.of("continuous_employment", not continuous)
        found = [
            evidence(
                self.category,
                CAREER_SUBJECT,
                "continuousEmployment",
                "Continuous Employment",
                [f"longest gap {gap:g} months"],
            )
        ] if continuous else []
        return PredicateResult.of("continuous_employment", continuous, found)
