"""Candidate-side tech stack and domain predicates."""

from __future__ import annotations

from ...schemas import Candidate, FilterCriteria
from ..context import EvaluationContext
from ..normalize import key_set, matching_values, normalize_key
from ..results import PredicateResult, evidence
from .common import CategoryFilter, experience_evidence, threshold

TECH_SUBJECT = "Tech Stack Experience"


class TechStackFilter(CategoryFilter):
    category = "projects"
    fields = ("candidate_tech_stacks", "tech_stack_min_years")

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []

        if criteria.is_set("candidate_tech_stacks"):
            selected = key_set(criteria.candidate_tech_stacks)
            found = []
            seen: set[str] = set()
            for experience in candidate.work_experiences:
                values = matching_values(experience.tech_stacks, selected)
                if values:
                    seen.update(normalize_key(value) for value in values)
                    found.append(
                        experience_evidence(
                            self.category, candidate, experience, "candidateTechStack", "Tech Stack", values
                        )
                    )
            if criteria.candidate_tech_stacks_require_all:
                matched = selected <= seen
            else:
                matched = bool(found)
            results.append(PredicateResult.of("candidate_tech_stacks", matched, found))

        requirement = criteria.tech_stack_min_years
        min_years = threshold(requirement, "min_years") if requirement.is_active else None
        if min_years is not None:
            # every selected stack must individually reach the minimum
            reached: list[str] = []
            matched = True
            for tech in requirement.tech_stacks:
                if not tech or not tech.strip():
                    continue
                years = context.metrics.tech_stack_years(candidate, tech)
                if years >= min_years:
                    reached.append(f"{tech.strip()}: {years} yrs")
                else:
                    matched = False
            found = [
                evidence("experience", TECH_SUBJECT, "techStackYears", "Tech Stack Years", reached)
            ] if matched and reached else []
            results.append(PredicateResult.of("tech_stack_min_years", matched, found))

        return results


class DomainFilter(CategoryFilter):
    category = "projects"
    fields = ("candidate_domains",)

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        if not criteria.is_set("candidate_domains"):
            return []
        selected = key_set(criteria.candidate_domains)
        found = []
        for experience in candidate.work_experiences:
            values = matching_values(experience.domains, selected)
            if values:
                found.append(
                    experience_evidence(
                        self.category, candidate, experience, "candidateDomain", "Domain", values
                    )
                )
        return [PredicateResult.of("candidate_domains", bool(found), found)]
