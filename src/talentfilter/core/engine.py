"""Boolean filter engine combining every active category with AND."""

from __future__ import annotations

from typing import Iterable

from ..schemas import Candidate, EntityFilters, FilterCriteria
from .context import EvaluationContext
from .filters import CategoryFilter, EntityFilter, default_filters
from .results import PredicateResult


class FilterEngine:
    """Decides set membership for one candidate under one criteria value.

    Inactive categories are skipped entirely, so an empty criteria value
    admits every candidate.
    """

    def __init__(
        self,
        filters: Iterable[CategoryFilter] | None = None,
        entity_filter: EntityFilter | None = None,
    ) -> None:
        self._filters = list(filters) if filters is not None else default_filters()
        self._entity_filter = entity_filter or EntityFilter()

    @property
    def filters(self) -> list[CategoryFilter]:
        return list(self._filters)

    def active_filters(self, criteria: FilterCriteria) -> list[CategoryFilter]:
        return [category for category in self._filters if category.is_active(criteria)]

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        for category in self.active_filters(criteria):
            results.extend(category.evaluate(candidate, criteria, context))
        return results

    def matches(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> bool:
        for category in self.active_filters(criteria):
            if not all(result.matched for result in category.evaluate(candidate, criteria, context)):
                return False
        return True

    def entity_results(
        self,
        candidate: Candidate,
        entity_filters: EntityFilters | None,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        if entity_filters is None or entity_filters.is_empty():
            return []
        return self._entity_filter.evaluate(candidate, entity_filters, context)

    def entity_matches(
        self,
        candidate: Candidate,
        entity_filters: EntityFilters | None,
        context: EvaluationContext,
    ) -> bool:
        return all(result.matched for result in self.entity_results(candidate, entity_filters, context))
