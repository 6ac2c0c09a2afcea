"""Single-entity constraints coming from navigation context.

Each reference matches by id where the candidate record can be resolved to a
canonical entity, and by normalized name otherwise.
"""

from __future__ import annotations

from ...schemas import Candidate, EntityFilters, EntityRef
from ..context import EvaluationContext
from ..normalize import normalize_key
from ..results import Evidence, PredicateResult, evidence
from .common import experience_context, experience_label, iter_project_refs, record_key


def _ref_matches(ref: EntityRef, name: str | None, resolved_id: str | None) -> bool:
    if ref.id and resolved_id and ref.id == resolved_id:
        return True
    wanted = normalize_key(ref.name)
    return bool(wanted) and normalize_key(name) == wanted


class EntityFilter:
    """Hard constraints ANDed in before criteria evaluation."""

    def evaluate(
        self,
        candidate: Candidate,
        filters: EntityFilters,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        if filters.project is not None:
            results.append(self._project(candidate, filters.project, context))
        if filters.university is not None:
            results.append(self._university(candidate, filters.university, context))
        if filters.employer is not None:
            results.append(self._employer(candidate, filters.employer, context))
        if filters.certification is not None:
            results.append(self._certification(candidate, filters.certification))
        return results

    def _project(self, candidate: Candidate, ref: EntityRef, context: EvaluationContext) -> PredicateResult:
        found: list[Evidence] = []
        seen: set[str] = set()
        for experience, reference in iter_project_refs(candidate):
            project = context.reference.project(reference.project_name)
            resolved_id = project.id if project is not None else reference.id
            key = normalize_key(reference.project_name)
            if key in seen or not _ref_matches(ref, reference.project_name, resolved_id):
                continue
            seen.add(key)
            extra = experience_context(experience) if experience is not None else {}
            found.append(
                evidence(
                    "projects",
                    reference.project_name,
                    "project",
                    "Project",
                    [reference.project_name],
                    **extra,
                )
            )
        return PredicateResult.of("entity_project", bool(found), found)

    def _university(self, candidate: Candidate, ref: EntityRef, context: EvaluationContext) -> PredicateResult:
        found: list[Evidence] = []
        for education in candidate.educations:
            campus = context.reference.campus(education.university_location_id)
            if campus is not None:
                university = campus[0]
                hit = _ref_matches(ref, university.name, university.id)
            else:
                hit = _ref_matches(ref, education.university_location_name, None)
            if hit:
                found.append(
                    evidence(
                        "education",
                        education.university_location_name,
                        "university",
                        "University",
                        [education.university_location_name],
                        key=record_key(education, candidate.educations),
                        degree_name=education.degree_name,
                        major_name=education.major_name,
                    )
                )
        return PredicateResult.of("entity_university", bool(found), found)

    def _employer(self, candidate: Candidate, ref: EntityRef, context: EvaluationContext) -> PredicateResult:
        found: list[Evidence] = []
        for experience in candidate.work_experiences:
            employer = context.reference.employer(experience.employer_name)
            resolved_id = employer.id if employer is not None else None
            if _ref_matches(ref, experience.employer_name, resolved_id):
                found.append(
                    evidence(
                        "employers",
                        experience.employer_name,
                        "employer",
                        "Employer",
                        [experience_label(experience)],
                        key=record_key(experience, candidate.work_experiences),
                        **experience_context(experience),
                    )
                )
        return PredicateResult.of("entity_employer", bool(found), found)

    def _certification(self, candidate: Candidate, ref: EntityRef) -> PredicateResult:
        found = [
            evidence(
                "certifications",
                held.certification_name,
                "certification",
                "Certification",
                [held.certification_name],
                key=record_key(held, candidate.certifications),
                issue_date=held.issue_date,
                expiry_date=held.expiry_date,
            )
            for held in candidate.certifications
            if _ref_matches(ref, held.certification_name, held.certification_id)
        ]
        return PredicateResult.of("entity_certification", bool(found), found)
