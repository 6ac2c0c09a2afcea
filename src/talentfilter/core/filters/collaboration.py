"""Collaboration predicates built on the timeline matcher."""

from __future__ import annotations

from ...schemas import Candidate, FilterCriteria
from ..collaboration import Collaboration, find_collaborations
from ..context import EvaluationContext
from ..normalize import key_set
from ..results import Evidence, PredicateResult, evidence
from .common import CategoryFilter, title_matches


def tolerance_days(criteria: FilterCriteria, context: EvaluationContext) -> int | None:
    """Criteria tolerance when given explicitly, else the configured default."""
    if "collaboration_tolerance_days" in criteria.model_fields_set:
        return criteria.collaboration_tolerance_days
    return context.settings.collaboration_tolerance_days


def _collaboration_evidence(collaboration: Collaboration, type_: str, label: str) -> Evidence:
    if collaboration.employer_name:
        value = f"{collaboration.project_name} @ {collaboration.employer_name}"
    else:
        value = collaboration.project_name
    return evidence(
        "collaboration",
        collaboration.partner_name or collaboration.partner_id,
        type_,
        label,
        [value],
        key=collaboration.partner_id,
        partner_id=collaboration.partner_id,
        project_name=collaboration.project_name,
        employer_name=collaboration.employer_name,
    )


class CollaborationFilter(CategoryFilter):
    """Worked with a top developer, or with someone holding a given title."""

    category = "collaboration"
    fields = ("worked_with_top_developer", "worked_with_job_titles")

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        tolerance = tolerance_days(criteria, context)
        employers = criteria.collaboration_employers

        if criteria.worked_with_top_developer is not None:
            found: list[Evidence] = []
            for partner in context.top_developers:
                if partner.id == candidate.id:
                    continue
                shared = find_collaborations(
                    candidate,
                    partner,
                    reference=context.reference,
                    tolerance_days=tolerance,
                    employer_filter=employers,
                )
                found.extend(
                    _collaboration_evidence(item, "topDeveloper", "Top Developer") for item in shared
                )
            if criteria.worked_with_top_developer:
                results.append(PredicateResult.of("worked_with_top_developer", bool(found), found))
            else:
                results.append(PredicateResult.of("worked_with_top_developer", not found))

        if criteria.is_set("worked_with_job_titles"):
            selected = key_set(criteria.worked_with_job_titles)
            found = []
            for partner in context.candidates:
                if partner.id == candidate.id:
                    continue
                shared = find_collaborations(
                    candidate,
                    partner,
                    reference=context.reference,
                    tolerance_days=tolerance,
                    employer_filter=employers,
                    target_experience=lambda exp: title_matches(exp.job_title, selected),
                    include_standalone=False,
                )
                found.extend(
                    _collaboration_evidence(item, "colleagueTitle", "Colleague Title") for item in shared
                )
            results.append(PredicateResult.of("worked_with_job_titles", bool(found), found))

        return results
