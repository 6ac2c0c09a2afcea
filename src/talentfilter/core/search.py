"""Search facade: entity filters, criteria, explanation and ranking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from ..schemas import Candidate, DatasetSnapshot, EntityFilters, FilterCriteria
from .connections import MutualConnection, find_mutual_connections
from .context import EngineSettings, EvaluationContext, resolve_as_of
from .engine import FilterEngine
from .explain import MatchExplainer
from .ranking import rank
from .reference import OptionIndex, OptionTables
from .results import MatchContext

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class SearchResult:
    """Filtered, ordered candidates plus their explanations when ranked."""

    candidates: list[Candidate]
    match_contexts: dict[str, MatchContext] = field(default_factory=dict)
    active: bool = False


class CandidateSearch:
    """Runs one evaluation pass over an immutable snapshot."""

    def __init__(
        self,
        *,
        engine: FilterEngine | None = None,
        explainer: MatchExplainer | None = None,
        settings: EngineSettings | None = None,
        option_index: OptionIndex | None = None,
    ) -> None:
        self._engine = engine or FilterEngine()
        self._explainer = explainer or MatchExplainer(self._engine)
        self._settings = settings or EngineSettings()
        self._options = option_index or OptionIndex()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def context(self, snapshot: DatasetSnapshot, as_of: Any = None) -> EvaluationContext:
        return EvaluationContext.from_snapshot(snapshot, as_of=as_of, settings=self._settings)

    def search(
        self,
        snapshot: DatasetSnapshot,
        criteria: FilterCriteria,
        entity_filters: EntityFilters | None = None,
        as_of: Any = None,
    ) -> SearchResult:
        context = self.context(snapshot, as_of)
        has_entities = entity_filters is not None and not entity_filters.is_empty()
        active = has_entities or not criteria.is_empty()

        filtered = [
            candidate
            for candidate in snapshot.candidates
            if self._engine.entity_matches(candidate, entity_filters, context)
            and self._engine.matches(candidate, criteria, context)
        ]

        match_contexts: dict[str, MatchContext] = {}
        if active:
            match_contexts = {
                candidate.id: self._explainer.explain(candidate, criteria, context, entity_filters)
                for candidate in filtered
            }
        ordered = rank(filtered, match_contexts, active=active)

        logger.info(
            "search.completed",
            total=len(snapshot.candidates),
            matched=len(ordered),
            active=active,
            active_fields=criteria.active_fields(),
            as_of=context.as_of.isoformat(),
        )
        return SearchResult(candidates=ordered, match_contexts=match_contexts, active=active)

    def options(self, snapshot: DatasetSnapshot) -> OptionTables:
        return self._options.get(snapshot)

    def invalidate_options(self) -> None:
        self._options.invalidate()

    def connections(
        self,
        snapshot: DatasetSnapshot,
        candidate_id: str,
        as_of: Any = None,
    ) -> list[MutualConnection]:
        candidate = next((c for c in snapshot.candidates if c.id == candidate_id), None)
        if candidate is None:
            raise KeyError(f"Unknown candidate: {candidate_id!r}")
        return find_mutual_connections(
            candidate,
            snapshot.candidates,
            home_employer=self._settings.home_employer,
            today=resolve_as_of(as_of),
            tolerance_months=self._settings.connection_tolerance_months,
        )
