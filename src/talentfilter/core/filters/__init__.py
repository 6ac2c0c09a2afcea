"""Predicate categories evaluated by the filter engine."""

from __future__ import annotations

from .basic import BasicInfoFilter, SalaryFilter
from .collaboration import CollaborationFilter
from .common import CategoryFilter
from .credentials import AchievementFilter, CertificationFilter
from .education import EducationFilter
from .employer import EmployerFilter
from .entity import EntityFilter
from .project import ProjectFilter, PublishingFilter
from .skills import DomainFilter, TechStackFilter
from .work_history import WorkHistoryFilter


def default_filters() -> list[CategoryFilter]:
    """All categories in evaluation order; cheap checks run first."""
    return [
        BasicInfoFilter(),
        SalaryFilter(),
        WorkHistoryFilter(),
        EmployerFilter(),
        ProjectFilter(),
        TechStackFilter(),
        DomainFilter(),
        EducationFilter(),
        CertificationFilter(),
        AchievementFilter(),
        PublishingFilter(),
        CollaborationFilter(),
    ]


__all__ = [
    "AchievementFilter",
    "BasicInfoFilter",
    "CategoryFilter",
    "CertificationFilter",
    "CollaborationFilter",
    "DomainFilter",
    "EducationFilter",
    "EmployerFilter",
    "EntityFilter",
    "ProjectFilter",
    "PublishingFilter",
    "SalaryFilter",
    "TechStackFilter",
    "WorkHistoryFilter",
    "default_filters",
]
