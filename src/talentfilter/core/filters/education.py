"""Education predicates; universities are joined by campus location id."""

from __future__ import annotations

from ...schemas import Candidate, CandidateEducation, FilterCriteria
from ..context import EvaluationContext
from ..normalize import key_set, normalize_key
from ..results import Evidence, PredicateResult, evidence
from .common import CategoryFilter, in_date_window, record_key


class EducationFilter(CategoryFilter):
    category = "education"
    fields = (
        "universities",
        "university_countries",
        "university_rankings",
        "university_cities",
        "degree_names",
        "major_names",
        "is_topper",
        "is_cheetah",
        "education_start_month",
        "graduation_start",
        "graduation_end",
    )

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        educations = candidate.educations

        if criteria.is_set("universities"):
            selected = key_set(criteria.universities)
            found = []
            for education in educations:
                campus = context.reference.campus(education.university_location_id)
                if campus is not None:
                    hit = normalize_key(campus[0].name) in selected
                else:
                    location_name = normalize_key(education.university_location_name)
                    hit = bool(location_name) and any(name in location_name for name in selected)
                if hit:
                    found.append(
                        self._evidence(
                            candidate,
                            education,
                            "university",
                            "University",
                            [education.university_location_name],
                        )
                    )
            results.append(PredicateResult.of("universities", bool(found), found))

        for field_name, type_, label in (
            ("university_countries", "country", "Country"),
            ("university_rankings", "ranking", "Ranking"),
            ("university_cities", "city", "Campus City"),
        ):
            if not criteria.is_set(field_name):
                continue
            selected = key_set(getattr(criteria, field_name))
            found = []
            for education in educations:
                campus = context.reference.campus(education.university_location_id)
                if campus is None:
                    continue
                university, location = campus
                value = {
                    "country": university.country,
                    "ranking": university.ranking,
                    "city": location.city,
                }[type_]
                if value and normalize_key(value) in selected:
                    found.append(self._evidence(candidate, education, type_, label, [value]))
            results.append(PredicateResult.of(field_name, bool(found), found))

        for field_name, attribute, type_, label in (
            ("degree_names", "degree_name", "degree", "Degree"),
            ("major_names", "major_name", "major", "Major"),
        ):
            if not criteria.is_set(field_name):
                continue
            selected = key_set(getattr(criteria, field_name))
            found = [
                self._evidence(candidate, education, type_, label, [getattr(education, attribute)])
                for education in educations
                if normalize_key(getattr(education, attribute)) in selected
            ]
            results.append(PredicateResult.of(field_name, bool(found), found))

        for field_name, badge in (("is_topper", "Topper"), ("is_cheetah", "Cheetah")):
            wanted = getattr(criteria, field_name)
            if wanted is None:
                continue
            flagged = [education for education in educations if getattr(education, field_name) is True]
            if wanted:
                found = [
                    self._evidence(candidate, education, "achievement", "Achievement", [badge])
                    for education in flagged
                ]
                results.append(PredicateResult.of(field_name, bool(flagged), found))
            else:
                results.append(PredicateResult.of(field_name, not flagged))

        if criteria.education_start_month is not None:
            month = (criteria.education_start_month.year, criteria.education_start_month.month)
            found = [
                self._evidence(
                    candidate, education, "startMonth", "Start Month", [education.start_month.strftime("%B %Y")]
                )
                for education in educations
                if education.start_month is not None
                and (education.start_month.year, education.start_month.month) == month
            ]
            results.append(PredicateResult.of("education_start_month", bool(found), found))

        if criteria.graduation_start is not None or criteria.graduation_end is not None:
            found = [
                self._evidence(
                    candidate, education, "graduation", "Graduation", [education.end_month.strftime("%B %Y")]
                )
                for education in educations
                if education.end_month is not None
                and in_date_window(
                    education.end_month,
                    education.end_month,
                    criteria.graduation_start,
                    criteria.graduation_end,
                )
            ]
            results.append(PredicateResult.of("graduation", bool(found), found))

        return results

    def _evidence(
        self,
        candidate: Candidate,
        education: CandidateEducation,
        type_: str,
        label: str,
        values: list,
    ) -> Evidence:
        return evidence(
            self.category,
            education.university_location_name or education.university_location_id,
            type_,
            label,
            values,
            key=record_key(education, candidate.educations),
            degree_name=education.degree_name,
            major_name=education.major_name,
            grades=education.grades,
            is_topper=education.is_topper,
            is_cheetah=education.is_cheetah,
        )
