"""Pydantic schema definitions for the candidate dataset and search criteria."""

from __future__ import annotations

from .candidate import (
    Achievement,
    Candidate,
    CandidateCertification,
    CandidateEducation,
    ProjectReference,
    WorkExperience,
)
from .criteria import (
    CareerTransition,
    EntityFilters,
    EntityRef,
    FilterCriteria,
    TechStackMinYears,
    WorkModeMinYears,
)
from .reference import (
    Certification,
    DatasetSnapshot,
    Employer,
    EmployerLocation,
    Project,
    University,
    UniversityLocation,
)

__all__ = [
    "Achievement",
    "Candidate",
    "CandidateCertification",
    "CandidateEducation",
    "CareerTransition",
    "Certification",
    "DatasetSnapshot",
    "Employer",
    "EmployerLocation",
    "EntityFilters",
    "EntityRef",
    "FilterCriteria",
    "Project",
    "ProjectReference",
    "TechStackMinYears",
    "University",
    "UniversityLocation",
    "WorkExperience",
    "WorkModeMinYears",
]
