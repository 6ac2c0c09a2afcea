"""Match explanations derived from the same predicate results as the engine."""

from __future__ import annotations

from typing import Iterable

from ..schemas import Candidate, EntityFilters, FilterCriteria
from .context import EvaluationContext
from .engine import FilterEngine
from .results import (
    CATEGORY_LABELS,
    CategoryType,
    Criterion,
    Evidence,
    MatchCategory,
    MatchContext,
    MatchItem,
    PredicateResult,
)


def _merge(criteria: list[Criterion], criterion: Criterion) -> list[Criterion]:
    for index, existing in enumerate(criteria):
        if existing.type == criterion.type and existing.label == criterion.label:
            values = existing.values + tuple(v for v in criterion.values if v not in existing.values)
            criteria[index] = Criterion(type=existing.type, label=existing.label, values=values)
            return criteria
    criteria.append(criterion)
    return criteria


def group_evidence(results: Iterable[PredicateResult]) -> list[MatchCategory]:
    """Group evidence of matched predicates by category, then by subject.

    Subjects are told apart by record key, so repeated stints at one
    employer stay separate items. Criteria of the same type on one subject
    are merged and their values deduplicated. Categories follow the fixed
    display order; empty ones are omitted.
    """
    grouped: dict[CategoryType, dict[tuple[str, str], MatchItem]] = {}
    for result in results:
        if not result.matched:
            continue
        for item in result.evidence:
            _add(grouped, item)

    categories: list[MatchCategory] = []
    for category_type, label in CATEGORY_LABELS.items():
        items = grouped.get(category_type)
        if items:
            categories.append(MatchCategory(type=category_type, label=label, items=list(items.values())))
    return categories


def _add(grouped: dict[CategoryType, dict[tuple[str, str], MatchItem]], item: Evidence) -> None:
    items = grouped.setdefault(item.category, {})
    subject = (item.key, item.subject)
    existing = items.get(subject)
    if existing is None:
        items[subject] = MatchItem(
            name=item.subject,
            matched_criteria=[item.criterion],
            context=dict(item.context),
        )
        return
    _merge(existing.matched_criteria, item.criterion)
    for key, value in item.context.items():
        existing.context.setdefault(key, value)


class MatchExplainer:
    """Builds the per-candidate :class:`MatchContext` used for ranking."""

    def __init__(self, engine: FilterEngine) -> None:
        self._engine = engine

    def explain(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
        entity_filters: EntityFilters | None = None,
    ) -> MatchContext:
        results = self._engine.entity_results(candidate, entity_filters, context)
        results.extend(self._engine.evaluate(candidate, criteria, context))
        categories = group_evidence(results)
        return MatchContext(
            candidate_id=candidate.id,
            total_matches=sum(category.count for category in categories),
            categories=categories,
        )
