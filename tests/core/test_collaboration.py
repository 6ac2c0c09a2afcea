from __future__ import annotations

from datetime import date

import pytest

from talentfilter.core import (
    EngineSettings,
    EvaluationContext,
    FilterEngine,
    ReferenceData,
    find_collaborations,
    worked_together,
)
from talentfilter.core.filters import CollaborationFilter
from talentfilter.schemas import Candidate, FilterCriteria, Project


def build_reference(project_start: date | None = date(2021, 1, 5)) -> ReferenceData:
    return ReferenceData(
        projects=[Project(project_name="iapartments", start_date=project_start)]
    )


def build_person(
    candidate_id: str,
    start: str | None,
    *,
    employer: str = "DPL",
    title: str = "Developer",
    top: bool = False,
    standalone: list[str] | None = None,
) -> Candidate:
    return Candidate.model_validate(
        {
            "id": candidate_id,
            "name": f"Person {candidate_id}",
            "is_top_developer": top,
            "work_experiences": [
                {
                    "employer_name": employer,
                    "job_title": title,
                    "start_date": start,
                    "projects": [{"project_name": "iApartments"}],
                }
            ],
            "projects": [{"project_name": name} for name in standalone or []],
        }
    )


def test_worked_together_within_tolerance():
    person_a = build_person("A", "2021-01-01")
    person_b = build_person("B", "2021-01-20", top=True)

    assert worked_together(person_a, person_b, reference=build_reference(), tolerance_days=30) is True


@pytest.mark.parametrize("tolerance", [None, 30, 60, 10])
def test_worked_together_is_symmetric(tolerance):
    person_a = build_person("A", "2021-01-01")
    person_b = build_person("B", "2021-03-01")
    reference = build_reference()

    forward = worked_together(person_a, person_b, reference=reference, tolerance_days=tolerance)
    backward = worked_together(person_b, person_a, reference=reference, tolerance_days=tolerance)

    assert forward == backward


def test_tolerance_window_rejects_distant_start():
    person_a = build_person("A", "2021-01-01")
    person_b = build_person("B", "2021-03-01")
    reference = build_reference()

    assert worked_together(person_a, person_b, reference=reference, tolerance_days=30) is False
    assert worked_together(person_a, person_b, reference=reference, tolerance_days=None) is True


def test_tolerance_needs_dates_on_both_sides_and_project():
    dated = build_person("A", "2021-01-01")
    undated = build_person("B", None)

    assert worked_together(dated, undated, reference=build_reference(), tolerance_days=30) is False
    assert worked_together(
        dated, build_person("C", "2021-01-02"), reference=build_reference(None), tolerance_days=30
    ) is False
    assert worked_together(
        dated, build_person("C", "2021-01-02"), reference=ReferenceData(), tolerance_days=30
    ) is False


def test_employer_filter_and_employer_equality():
    person_a = build_person("A", "2021-01-01")
    person_b = build_person("B", "2021-01-10")
    elsewhere = build_person("C", "2021-01-10", employer="Other Co")
    reference = build_reference()

    assert worked_together(person_a, person_b, reference=reference, employer_filter=[" dpl"]) is True
    assert worked_together(person_a, person_b, reference=reference, employer_filter=["Other Co"]) is False
    assert worked_together(person_a, elsewhere, reference=reference) is False


def test_standalone_projects_skip_tolerance_but_not_employer_filter():
    person_a = build_person("A", None, employer="Alpha", standalone=["OpenLib"])
    person_b = build_person("B", None, employer="Beta", standalone=["openlib "])
    reference = ReferenceData()

    shared = find_collaborations(person_a, person_b, reference=reference, tolerance_days=30)

    assert [(item.project_name, item.standalone) for item in shared] == [("OpenLib", True)]
    assert worked_together(person_a, person_b, reference=reference, employer_filter=["Alpha"]) is False
    assert worked_together(
        person_a, person_b, reference=reference, include_standalone=False
    ) is False


def build_context(candidates: list[Candidate], **settings) -> EvaluationContext:
    return EvaluationContext(
        reference=build_reference(),
        candidates=candidates,
        as_of=date(2024, 6, 1),
        settings=EngineSettings(**settings),
    )


def test_worked_with_top_developer_excludes_self():
    person_a = build_person("A", "2021-01-01")
    star = build_person("B", "2021-01-20", top=True)
    context = build_context([person_a, star])
    engine = FilterEngine()

    assert engine.matches(person_a, FilterCriteria(worked_with_top_developer=True), context) is True
    assert engine.matches(star, FilterCriteria(worked_with_top_developer=True), context) is False
    assert engine.matches(star, FilterCriteria(worked_with_top_developer=False), context) is True


def test_worked_with_job_titles_targets_matching_experiences():
    person_a = build_person("A", "2021-01-01")
    lead = build_person("L", "2021-01-15", title="Tech Lead")
    peer = build_person("P", "2021-01-15", title="QA Engineer")
    context = build_context([person_a, lead, peer])

    results = CollaborationFilter().evaluate(
        person_a, FilterCriteria(worked_with_job_titles=["lead"]), context
    )

    assert results[0].matched is True
    assert [item.subject for item in results[0].evidence] == ["Person L"]
    assert results[0].evidence[0].criterion.values == ("iApartments @ DPL",)


def test_tolerance_defaults_to_configured_setting():
    person_a = build_person("A", "2021-01-01")
    star = build_person("B", "2021-06-01", top=True)
    criteria = FilterCriteria(worked_with_top_developer=True)
    engine = FilterEngine()

    assert engine.matches(person_a, criteria, build_context([person_a, star])) is False
    assert engine.matches(
        person_a, criteria, build_context([person_a, star], collaboration_tolerance_days=None)
    ) is True
    assert engine.matches(
        person_a,
        FilterCriteria(worked_with_top_developer=True, collaboration_tolerance_days=200),
        build_context([person_a, star]),
    ) is True


def test_collaboration_employers_alone_do_not_activate_category():
    criteria = FilterCriteria(collaboration_employers=["DPL"], collaboration_tolerance_days=5)

    assert criteria.is_empty() is True
    assert CollaborationFilter().is_active(criteria) is False
