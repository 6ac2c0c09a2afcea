from __future__ import annotations

from datetime import date

from talentfilter.core import EvaluationContext, FilterEngine, ReferenceData
from talentfilter.core.filters import BasicInfoFilter, SalaryFilter
from talentfilter.schemas import Candidate, FilterCriteria


def build_candidate(**fields) -> Candidate:
    data = {"id": "C-1", "name": "Ayesha Khan", "city": "Lahore", "status": "Active"}
    data.update(fields)
    return Candidate.model_validate(data)


def build_context() -> EvaluationContext:
    return EvaluationContext(reference=ReferenceData(), as_of=date(2024, 6, 1))


def test_city_membership_is_case_insensitive_with_evidence():
    candidate = build_candidate()
    criteria = FilterCriteria(cities=[" lahore", "Karachi"])

    results = BasicInfoFilter().evaluate(candidate, criteria, build_context())

    assert [result.name for result in results] == ["cities"]
    assert results[0].matched is True
    assert results[0].evidence[0].criterion.values == ("Lahore",)
    assert results[0].evidence[0].subject == "Basic Information"


def test_exclude_cities_rejects_listed_city():
    engine = FilterEngine()
    context = build_context()

    assert engine.matches(build_candidate(), FilterCriteria(exclude_cities=["LAHORE"]), context) is False
    assert engine.matches(build_candidate(), FilterCriteria(exclude_cities=["Karachi"]), context) is True


def test_top_developer_flag_is_tri_state():
    engine = FilterEngine()
    context = build_context()
    regular = build_candidate()
    top = build_candidate(id="C-2", is_top_developer=True)

    assert engine.matches(top, FilterCriteria(is_top_developer=True), context) is True
    assert engine.matches(regular, FilterCriteria(is_top_developer=True), context) is False
    assert engine.matches(regular, FilterCriteria(is_top_developer=False), context) is True
    assert engine.matches(top, FilterCriteria(is_top_developer=None), context) is True


def test_salary_bounds_parse_leniently():
    candidate = build_candidate(current_salary=150000, expected_salary=220000)
    criteria = FilterCriteria(
        current_salary_min="100,000",
        current_salary_max="200000",
        expected_salary_max="250000",
    )

    results = SalaryFilter().evaluate(candidate, criteria, build_context())

    assert [(result.name, result.matched) for result in results] == [
        ("current_salary", True),
        ("expected_salary", True),
    ]
    assert results[0].evidence[0].criterion.values == ("150,000",)


def test_unparseable_salary_bound_is_not_applicable():
    candidate = build_candidate(current_salary=150000)
    criteria = FilterCriteria(current_salary_min="lots", current_salary_max="  ")

    assert SalaryFilter().evaluate(candidate, criteria, build_context()) == []
    assert FilterEngine().matches(candidate, criteria, build_context()) is True


def test_missing_salary_fails_active_bound():
    candidate = build_candidate(current_salary=None)
    criteria = FilterCriteria(current_salary_max="200000")

    assert FilterEngine().matches(candidate, criteria, build_context()) is False
