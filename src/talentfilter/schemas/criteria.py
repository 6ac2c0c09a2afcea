"""Structured search criteria.

Every field carries an explicit empty sentinel (``[]``, blank string or
``None``). A predicate category whose fields are all empty contributes no
constraint. Numeric thresholds stay free text and are parsed leniently by the
engine.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CRITERIA_CONFIG = ConfigDict(
    extra="forbid",
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
)

# Tuning knobs that never activate a category on their own.
PARAMETER_FIELDS = frozenset(
    {
        "candidate_tech_stacks_require_all",
        "collaboration_employers",
        "collaboration_tolerance_days",
        "continuous_employment_tolerance_months",
        "job_change_window_years",
        "job_title_started_career",
        "promotion_window_years",
    }
)


def is_blank(value: Any) -> bool:
    """Return True when ``value`` is an empty filter sentinel."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return not any(not is_blank(item) for item in value)
    if isinstance(value, BaseModel):
        return not getattr(value, "is_active", True)
    return False


class TechStackMinYears(BaseModel):
    """Every selected tech stack must reach ``min_years``."""

    tech_stacks: list[str] = Field(default_factory=list)
    min_years: str = ""

    model_config = CRITERIA_CONFIG

    @property
    def is_active(self) -> bool:
        return not is_blank(self.tech_stacks) and not is_blank(self.min_years)


class WorkModeMinYears(BaseModel):
    """At least one selected work mode must reach ``min_years``."""

    work_modes: list[str] = Field(default_factory=list)
    min_years: str = ""

    model_config = CRITERIA_CONFIG

    @property
    def is_active(self) -> bool:
        return not is_blank(self.work_modes) and not is_blank(self.min_years)


class CareerTransition(BaseModel):
    """Move from one employer type to another later in the timeline."""

    from_types: list[str] = Field(default_factory=list)
    to_types: list[str] = Field(default_factory=list)
    require_current: bool = False

    model_config = CRITERIA_CONFIG

    @property
    def is_active(self) -> bool:
        return not is_blank(self.from_types) and not is_blank(self.to_types)


class FilterCriteria(BaseModel):
    """One complete, already-validated candidate query."""

    # Basic information
    cities: list[str] = Field(default_factory=list)
    exclude_cities: list[str] = Field(default_factory=list)
    statuses: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    personality_types: list[str] = Field(default_factory=list)
    is_top_developer: bool | None = None

    # Salary
    current_salary_min: str = ""
    current_salary_max: str = ""
    expected_salary_min: str = ""
    expected_salary_max: str = ""

    # Work history
    job_titles: list[str] = Field(default_factory=list)
    job_title_started_career: bool = False
    is_currently_working: bool | None = None
    shift_types: list[str] = Field(default_factory=list)
    work_modes: list[str] = Field(default_factory=list)
    time_support_zones: list[str] = Field(default_factory=list)
    employer_types: list[str] = Field(default_factory=list)
    career_transition: CareerTransition = Field(default_factory=CareerTransition)
    work_mode_min_years: WorkModeMinYears = Field(default_factory=WorkModeMinYears)
    min_years_of_experience: str = ""
    max_years_of_experience: str = ""
    min_average_tenure: str = ""
    max_average_tenure: str = ""
    min_promotions: str = ""
    promotion_window_years: str = ""
    min_promotions_same_company: str = ""
    max_job_changes: str = ""
    job_change_window_years: str = ""
    continuous_employment: bool | None = None
    continuous_employment_tolerance_months: int = 3

    # Employer
    employers: list[str] = Field(default_factory=list)
    employer_status: list[str] = Field(default_factory=list)
    employer_countries: list[str] = Field(default_factory=list)
    employer_cities: list[str] = Field(default_factory=list)
    employer_salary_policies: list[str] = Field(default_factory=list)
    employer_size_min: str = ""
    employer_size_max: str = ""

    # Project
    projects: list[str] = Field(default_factory=list)
    project_status: list[str] = Field(default_factory=list)
    project_types: list[str] = Field(default_factory=list)
    tech_stacks: list[str] = Field(default_factory=list)
    vertical_domains: list[str] = Field(default_factory=list)
    horizontal_domains: list[str] = Field(default_factory=list)
    technical_aspects: list[str] = Field(default_factory=list)
    project_team_size_min: str = ""
    project_team_size_max: str = ""
    project_start_date: date | None = None
    project_end_date: date | None = None

    # Candidate tech stacks and domains
    candidate_tech_stacks: list[str] = Field(default_factory=list)
    candidate_tech_stacks_require_all: bool = False
    tech_stack_min_years: TechStackMinYears = Field(default_factory=TechStackMinYears)
    candidate_domains: list[str] = Field(default_factory=list)

    # Education
    universities: list[str] = Field(default_factory=list)
    university_countries: list[str] = Field(default_factory=list)
    university_rankings: list[str] = Field(default_factory=list)
    university_cities: list[str] = Field(default_factory=list)
    degree_names: list[str] = Field(default_factory=list)
    major_names: list[str] = Field(default_factory=list)
    is_topper: bool | None = None
    is_cheetah: bool | None = None
    education_start_month: date | None = None
    graduation_start: date | None = None
    graduation_end: date | None = None

    # Certifications and achievements
    certification_names: list[str] = Field(default_factory=list)
    certification_issuing_bodies: list[str] = Field(default_factory=list)
    certification_levels: list[str] = Field(default_factory=list)
    achievement_types: list[str] = Field(default_factory=list)
    achievement_names: list[str] = Field(default_factory=list)

    # Collaboration
    worked_with_top_developer: bool | None = None
    worked_with_job_titles: list[str] = Field(default_factory=list)
    collaboration_employers: list[str] = Field(default_factory=list)
    collaboration_tolerance_days: int | None = 30

    # Publishing
    is_published: bool | None = None
    publish_platforms: list[str] = Field(default_factory=list)
    min_download_count: str = ""

    model_config = CRITERIA_CONFIG

    def is_set(self, name: str) -> bool:
        return not is_blank(getattr(self, name))

    def any_set(self, *names: str) -> bool:
        return any(self.is_set(name) for name in names)

    def active_fields(self) -> list[str]:
        return [
            name
            for name in type(self).model_fields
            if name not in PARAMETER_FIELDS and self.is_set(name)
        ]

    def is_empty(self) -> bool:
        return not self.active_fields()


class EntityRef(BaseModel):
    """Single entity selected through navigation (id plus display name)."""

    id: str = ""
    name: str = ""

    model_config = CRITERIA_CONFIG


class EntityFilters(BaseModel):
    """Navigation-derived hard constraints applied before the criteria."""

    project: EntityRef | None = None
    university: EntityRef | None = None
    employer: EntityRef | None = None
    certification: EntityRef | None = None

    model_config = CRITERIA_CONFIG

    def is_empty(self) -> bool:
        return all(
            ref is None for ref in (self.project, self.university, self.employer, self.certification)
        )
