"""Canonical reference collections joined from candidate records."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from .candidate import RECORD_CONFIG, Candidate


class Project(BaseModel):
    """Canonical project record.

    ``team_size`` is either ``"N"`` or ``"N-M"``.
    """

    id: str = ""
    project_name: str
    employer_name: str | None = None
    status: str | None = None
    project_type: str | None = None
    tech_stacks: list[str] = Field(default_factory=list)
    vertical_domains: list[str] = Field(default_factory=list)
    horizontal_domains: list[str] = Field(default_factory=list)
    technical_aspects: list[str] = Field(default_factory=list)
    team_size: str | None = None
    is_published: bool = False
    publish_platforms: list[str] = Field(default_factory=list)
    download_count: int | None = None
    start_date: date | None = None
    end_date: date | None = None

    model_config = RECORD_CONFIG


class EmployerLocation(BaseModel):
    id: str = ""
    country: str | None = None
    city: str | None = None
    salary_policy: str | None = None
    min_size: int | None = None
    max_size: int | None = None
    is_headquarters: bool = False

    model_config = RECORD_CONFIG


class Employer(BaseModel):
    id: str = ""
    name: str
    status: str | None = None
    employer_type: str | None = None
    locations: list[EmployerLocation] = Field(default_factory=list)

    model_config = RECORD_CONFIG


class UniversityLocation(BaseModel):
    id: str
    city: str | None = None
    is_main_campus: bool = False

    model_config = RECORD_CONFIG


class University(BaseModel):
    id: str = ""
    name: str = ""
    country: str | None = None
    ranking: str | None = None
    locations: list[UniversityLocation] = Field(default_factory=list)

    model_config = RECORD_CONFIG


class Certification(BaseModel):
    id: str = ""
    certification_name: str
    issuing_body: str | None = None
    certification_level: str | None = None

    model_config = RECORD_CONFIG


class DatasetSnapshot(BaseModel):
    """Immutable input document for one evaluation pass."""

    candidates: list[Candidate] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    employers: list[Employer] = Field(default_factory=list)
    universities: list[University] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)

    model_config = RECORD_CONFIG
