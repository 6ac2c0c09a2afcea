from __future__ import annotations

from datetime import date

import pytest

from talentfilter.core import EvaluationContext, FilterEngine, ReferenceData
from talentfilter.core.filters import EmployerFilter, ProjectFilter
from talentfilter.core.filters.common import in_date_window
from talentfilter.core.filters.employer import employer_size
from talentfilter.schemas import Candidate, Employer, FilterCriteria, Project

AS_OF = date(2024, 6, 1)


def build_employers() -> list[Employer]:
    return [
        Employer.model_validate(
            {
                "name": "DPL",
                "status": "Active",
                "employer_type": "Services",
                "locations": [
                    {"country": "Pakistan", "city": "Lahore", "min_size": 10, "max_size": 50},
                    {"country": "UAE", "city": "Dubai", "min_size": 20, "max_size": 100},
                ],
            }
        )
    ]


def build_projects() -> list[Project]:
    return [
        Project(
            project_name="iApartments",
            status="Completed",
            project_type="Web",
            tech_stacks=["React", "Node"],
            vertical_domains=["Real Estate"],
            team_size="20-30",
            start_date=date(2021, 1, 5),
            end_date=date(2021, 12, 31),
        ),
        Project(
            project_name="Foodie App",
            project_type="Mobile",
            team_size="5",
            is_published=True,
            publish_platforms=["Play Store"],
            download_count=50000,
            start_date=date(2023, 1, 1),
        ),
        Project(project_name="Ledger", download_count=500, team_size="3"),
        Project(project_name="Side Quest", is_published=True, download_count=1000000),
    ]


def build_context() -> EvaluationContext:
    return EvaluationContext(
        reference=ReferenceData(employers=build_employers(), projects=build_projects()),
        as_of=AS_OF,
    )


def build_candidate() -> Candidate:
    return Candidate.model_validate(
        {
            "id": "C-1",
            "name": "Sana Malik",
            "work_experiences": [
                {
                    "employer_name": "dpl ",
                    "job_title": "Mobile Developer",
                    "start_date": "2021-01-01",
                    "projects": [{"project_name": "iapartments"}, {"project_name": "Foodie App"}],
                },
                {
                    "employer_name": "Unknown Labs",
                    "job_title": "QA Engineer",
                    "start_date": "2018-01-01",
                    "end_date": "2020-12-31",
                    "projects": [{"project_name": "Ledger"}, {"project_name": "Ghost"}],
                },
            ],
            "projects": [{"project_name": "Side Quest"}],
        }
    )


def test_employer_size_sums_locations():
    assert employer_size(build_employers()[0]) == (30, 150)


@pytest.mark.parametrize(
    ("low", "high", "expected"),
    [("100", "", True), ("", "20", False), ("140", "200", True), ("151", "", False)],
)
def test_employer_size_uses_range_overlap(low: str, high: str, expected: bool):
    criteria = FilterCriteria(employer_size_min=low, employer_size_max=high)

    assert FilterEngine().matches(build_candidate(), criteria, build_context()) is expected


def test_employer_attributes_resolve_by_name():
    engine = FilterEngine()
    context = build_context()

    assert engine.matches(build_candidate(), FilterCriteria(employer_countries=["uae"]), context) is True
    assert engine.matches(build_candidate(), FilterCriteria(employer_status=["Closed"]), context) is False


def test_unresolved_employer_only_fails_its_own_condition():
    candidate = Candidate.model_validate(
        {"id": "C-9", "work_experiences": [{"employer_name": "Nowhere Inc"}]}
    )
    results = EmployerFilter().evaluate(
        candidate,
        FilterCriteria(employers=["nowhere inc"], employer_cities=["Lahore"]),
        build_context(),
    )

    assert [(result.name, result.matched) for result in results] == [
        ("employers", True),
        ("employer_cities", False),
    ]


@pytest.mark.parametrize(
    ("low", "high", "expected"),
    [("25", "35", True), ("31", "40", False), ("", "4", True), ("40", "", False)],
)
def test_team_size_overlap(low: str, high: str, expected: bool):
    candidate = Candidate.model_validate(
        {
            "id": "C-2",
            "work_experiences": [
                {"employer_name": "DPL", "projects": [{"project_name": "iApartments"}]},
                {"employer_name": "Other", "projects": [{"project_name": "Ledger"}]},
            ],
        }
    )
    criteria = FilterCriteria(project_team_size_min=low, project_team_size_max=high)

    assert FilterEngine().matches(candidate, criteria, build_context()) is expected


def test_project_names_match_without_canonical_record():
    results = ProjectFilter().evaluate(
        build_candidate(), FilterCriteria(projects=["GHOST"]), build_context()
    )

    assert results[0].matched is True
    assert results[0].evidence[0].subject == "Ghost"


def test_project_attributes_use_canonical_projects():
    engine = FilterEngine()
    context = build_context()

    assert engine.matches(build_candidate(), FilterCriteria(tech_stacks=["node"]), context) is True
    assert engine.matches(build_candidate(), FilterCriteria(vertical_domains=["Fintech"]), context) is False
    assert engine.matches(build_candidate(), FilterCriteria(project_types=["mobile"]), context) is True


@pytest.mark.parametrize(
    ("start", "end", "lower", "upper", "expected"),
    [
        (date(2021, 1, 5), date(2021, 12, 31), date(2021, 6, 1), date(2022, 1, 1), True),
        (date(2021, 1, 5), date(2021, 12, 31), date(2021, 6, 1), None, False),
        (date(2021, 1, 5), date(2021, 12, 31), None, date(2021, 12, 31), True),
        (date(2021, 1, 5), date(2021, 12, 31), date(2022, 1, 1), date(2022, 6, 1), False),
        (date(2023, 1, 1), None, None, date(2022, 12, 31), False),
        (date(2023, 1, 1), None, date(2022, 1, 1), date(2023, 6, 1), True),
        (None, None, date(2022, 1, 1), None, False),
    ],
)
def test_date_window_three_way_branch(start, end, lower, upper, expected):
    assert in_date_window(start, end, lower, upper) is expected


def test_download_count_scoped_to_matching_job_titles():
    engine = FilterEngine()
    context = build_context()
    candidate = build_candidate()

    assert engine.matches(candidate, FilterCriteria(min_download_count="10000"), context) is True
    assert engine.matches(
        candidate, FilterCriteria(min_download_count="10000", job_titles=["qa"]), context
    ) is False
    assert engine.matches(
        candidate, FilterCriteria(min_download_count="10000", job_titles=["mobile"]), context
    ) is True


def test_published_flag_and_platforms():
    engine = FilterEngine()
    context = build_context()
    unpublished = Candidate.model_validate(
        {"id": "C-3", "projects": [{"project_name": "Ledger"}]}
    )

    assert engine.matches(build_candidate(), FilterCriteria(is_published=True), context) is True
    assert engine.matches(unpublished, FilterCriteria(is_published=True), context) is False
    assert engine.matches(unpublished, FilterCriteria(is_published=False), context) is True
    assert engine.matches(build_candidate(), FilterCriteria(publish_platforms=["play store"]), context) is True
