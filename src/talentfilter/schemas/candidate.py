"""Candidate aggregate records."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Snapshot records carry bookkeeping fields (createdAt, verification state, ...)
# that the engine never reads; they are dropped on load.
RECORD_CONFIG = ConfigDict(
    extra="ignore",
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
)


class ProjectReference(BaseModel):
    """Name-only pointer to a canonical project."""

    id: str = ""
    project_name: str = ""
    contribution_notes: str | None = None

    model_config = RECORD_CONFIG


class WorkExperience(BaseModel):
    """A single employment stint.

    ``employer_name`` is free text and is resolved against the employer
    collection by normalized name, not by identifier. A missing
    ``end_date`` means the experience is ongoing.
    """

    id: str = ""
    employer_name: str = ""
    job_title: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    tech_stacks: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    shift_type: str | None = None
    work_mode: str | None = None
    time_support_zones: list[str] = Field(default_factory=list)
    projects: list[ProjectReference] = Field(default_factory=list)

    model_config = RECORD_CONFIG

    @property
    def is_ongoing(self) -> bool:
        return self.end_date is None


class CandidateEducation(BaseModel):
    """Education entry joined to a university campus by location id."""

    id: str = ""
    university_location_id: str = ""
    university_location_name: str = ""
    degree_name: str | None = None
    major_name: str | None = None
    start_month: date | None = None
    end_month: date | None = None
    grades: str | None = None
    is_topper: bool | None = None
    is_cheetah: bool | None = None

    model_config = RECORD_CONFIG


class CandidateCertification(BaseModel):
    """Certification held by a candidate."""

    id: str = ""
    certification_id: str | None = None
    certification_name: str = ""
    issue_date: date | None = None
    expiry_date: date | None = None
    certification_url: str | None = None

    model_config = RECORD_CONFIG


class Achievement(BaseModel):
    """Competition result, award or similar recognition."""

    id: str = ""
    name: str = ""
    achievement_type: str | None = None
    ranking: str | None = None
    year: int | None = None
    url: str | None = None
    description: str | None = None

    model_config = RECORD_CONFIG


class Candidate(BaseModel):
    """Candidate aggregate owning its work history, education and credentials."""

    id: str
    name: str = ""
    posting_title: str | None = None
    email: str | None = None
    mobile_no: str | None = None
    cnic: str | None = None
    city: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None
    current_salary: float | None = None
    expected_salary: float | None = None
    source: str | None = None
    status: str | None = None
    is_top_developer: bool = False
    personality_type: str | None = None
    work_experiences: list[WorkExperience] = Field(default_factory=list)
    projects: list[ProjectReference] = Field(default_factory=list)
    educations: list[CandidateEducation] = Field(default_factory=list)
    certifications: list[CandidateCertification] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)

    model_config = RECORD_CONFIG
