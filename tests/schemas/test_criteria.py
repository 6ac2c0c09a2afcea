from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from talentfilter.schemas import Candidate, EntityFilters, EntityRef, FilterCriteria


def test_criteria_accept_camel_case_documents():
    criteria = FilterCriteria.model_validate(
        {
            "jobTitles": ["Engineer"],
            "currentSalaryMin": "100000",
            "techStackMinYears": {"techStacks": ["React"], "minYears": "2"},
            "projectStartDate": "2021-01-01",
            "isCurrentlyWorking": True,
        }
    )

    assert criteria.job_titles == ["Engineer"]
    assert criteria.tech_stack_min_years.is_active is True
    assert criteria.project_start_date == date(2021, 1, 1)
    assert criteria.active_fields() == [
        "current_salary_min",
        "job_titles",
        "is_currently_working",
        "project_start_date",
        "tech_stack_min_years",
    ]


def test_criteria_reject_unknown_fields():
    with pytest.raises(ValidationError):
        FilterCriteria.model_validate({"favouriteColour": ["blue"]})


def test_blank_sentinels_leave_criteria_empty():
    criteria = FilterCriteria(
        cities=["", "  "],
        current_salary_min="   ",
        tech_stack_min_years={"tech_stacks": ["React"], "min_years": ""},
        career_transition={"from_types": ["Startup"], "to_types": []},
        promotion_window_years="3",
    )

    assert criteria.is_empty() is True
    assert criteria.is_set("promotion_window_years") is True


def test_candidate_records_ignore_bookkeeping_fields():
    candidate = Candidate.model_validate(
        {
            "id": "C-1",
            "name": "Nida",
            "createdAt": "2024-01-01T00:00:00Z",
            "workExperiences": [
                {"employerName": "DPL", "startDate": "2022-01-01", "verificationStatus": "verified"}
            ],
        }
    )

    assert candidate.work_experiences[0].employer_name == "DPL"
    assert candidate.work_experiences[0].is_ongoing is True


def test_candidate_requires_id():
    with pytest.raises(ValidationError):
        Candidate.model_validate({"name": "No Id"})


def test_entity_filters_empty_state():
    assert EntityFilters().is_empty() is True
    assert EntityFilters(project=EntityRef(id="P-1")).is_empty() is False
