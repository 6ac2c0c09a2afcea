"""Filtering, explanation and ranking engine."""

from __future__ import annotations

from .collaboration import Collaboration, find_collaborations, worked_together
from .connections import MutualConnection, date_ranges_overlap, find_mutual_connections
from .context import EngineSettings, EvaluationContext, resolve_as_of
from .engine import FilterEngine
from .explain import MatchExplainer
from .metrics import (
    MetricsCache,
    average_tenure,
    job_changes,
    longest_employment_gap,
    promotions_in_last_years,
    promotions_same_company,
    tech_stack_years,
    work_mode_years,
    years_of_experience,
)
from .ranking import rank
from .reference import OptionIndex, OptionTables, ReferenceData
from .results import MatchCategory, MatchContext, MatchItem, PredicateResult
from .search import CandidateSearch, SearchResult

__all__ = [
    "CandidateSearch",
    "Collaboration",
    "EngineSettings",
    "EvaluationContext",
    "FilterEngine",
    "MatchCategory",
    "MatchContext",
    "MatchExplainer",
    "MatchItem",
    "MetricsCache",
    "MutualConnection",
    "OptionIndex",
    "OptionTables",
    "PredicateResult",
    "ReferenceData",
    "SearchResult",
    "average_tenure",
    "date_ranges_overlap",
    "find_collaborations",
    "find_mutual_connections",
    "job_changes",
    "longest_employment_gap",
    "promotions_in_last_years",
    "promotions_same_company",
    "rank",
    "resolve_as_of",
    "tech_stack_years",
    "work_mode_years",
    "worked_together",
    "years_of_experience",
]
