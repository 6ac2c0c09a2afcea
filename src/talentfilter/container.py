"""Dependency injection container for the candidate search engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import (
    CandidateSearch,
    EngineSettings,
    FilterEngine,
    MatchExplainer,
    OptionIndex,
)
from .core.filters import EntityFilter, default_filters
from .pipeline import CriteriaLoader, SearchPipeline, SnapshotLoader


class SearchContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    settings = providers.Singleton(EngineSettings)

    filters = providers.Callable(default_filters)
    entity_filter = providers.Singleton(EntityFilter)

    engine = providers.Singleton(
        FilterEngine,
        filters=filters,
        entity_filter=entity_filter,
    )

    explainer = providers.Singleton(MatchExplainer, engine=engine)

    option_index = providers.Singleton(OptionIndex)

    search = providers.Singleton(
        CandidateSearch,
        engine=engine,
        explainer=explainer,
        settings=settings,
        option_index=option_index,
    )

    snapshot_loader = providers.Factory(SnapshotLoader)
    criteria_loader = providers.Factory(CriteriaLoader)

    pipeline = providers.Factory(
        SearchPipeline,
        search=search,
        snapshot_loader=snapshot_loader,
        criteria_loader=criteria_loader,
    )


def create_container(*, settings: dict | None = None) -> SearchContainer:
    """Instantiate container with optional overrides."""

    container = SearchContainer()

    if not settings:
        return container

    engine_settings = settings.get("engine", {}) if isinstance(settings, dict) else {}
    if engine_settings:
        container.settings.override(
            providers.Singleton(EngineSettings, **engine_settings)
        )

    return container
