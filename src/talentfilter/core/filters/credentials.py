"""Certification and achievement predicates."""

from __future__ import annotations

from ...schemas import Candidate, FilterCriteria
from ..context import EvaluationContext
from ..normalize import key_set, normalize_key
from ..results import PredicateResult, evidence
from .common import CategoryFilter, record_key


class CertificationFilter(CategoryFilter):
    """Certification name, issuing body and level.

    Issuing body and level come from the canonical certification resolved
    by name.
    """

    category = "certifications"
    fields = ("certification_names", "certification_issuing_bodies", "certification_levels")

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []

        if criteria.is_set("certification_names"):
            selected = key_set(criteria.certification_names)
            found = [
                evidence(
                    self.category,
                    held.certification_name,
                    "certification",
                    "Certification",
                    [held.certification_name],
                    key=record_key(held, candidate.certifications),
                    issue_date=held.issue_date,
                    expiry_date=held.expiry_date,
                )
                for held in candidate.certifications
                if normalize_key(held.certification_name) in selected
            ]
            results.append(PredicateResult.of("certification_names", bool(found), found))

        for field_name, attribute, type_, label in (
            ("certification_issuing_bodies", "issuing_body", "issuingBody", "Issuing Body"),
            ("certification_levels", "certification_level", "level", "Level"),
        ):
            if not criteria.is_set(field_name):
                continue
            selected = key_set(getattr(criteria, field_name))
            found = []
            for held in candidate.certifications:
                canonical = context.reference.certification(held.certification_name)
                if canonical is None:
                    continue
                value = getattr(canonical, attribute)
                if value and normalize_key(value) in selected:
                    found.append(
                        evidence(
                            self.category,
                            held.certification_name,
                            type_,
                            label,
                            [value],
                            key=record_key(held, candidate.certifications),
                            issue_date=held.issue_date,
                            expiry_date=held.expiry_date,
                        )
                    )
            results.append(PredicateResult.of(field_name, bool(found), found))

        return results


class AchievementFilter(CategoryFilter):
    category = "achievements"
    fields = ("achievement_types", "achievement_names")

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        for field_name, attribute, type_, label in (
            ("achievement_types", "achievement_type", "achievementType", "Achievement Type"),
            ("achievement_names", "name", "achievement", "Achievement"),
        ):
            if not criteria.is_set(field_name):
                continue
            selected = key_set(getattr(criteria, field_name))
            found = [
                evidence(
                    self.category,
                    achievement.name,
                    type_,
                    label,
                    [getattr(achievement, attribute)],
                    key=record_key(achievement, candidate.achievements),
                    ranking=achievement.ranking,
                    year=achievement.year,
                )
                for achievement in candidate.achievements
                if normalize_key(getattr(achievement, attribute)) in selected
            ]
            results.append(PredicateResult.of(field_name, bool(found), found))
        return results
