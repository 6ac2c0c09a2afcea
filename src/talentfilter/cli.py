"""Typer CLI entrypoint for the candidate search engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .logging import configure_logging
from .pipeline import dump_json
from .schemas import EntityFilters, EntityRef
from .schemas.config import load_config

app = typer.Typer(help="Candidate filtering and match ranking CLI.")


def _load_settings(config: Optional[Path]) -> tuple[dict[str, Any], Optional[str]]:
    if not config:
        return {}, None
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    try:
        app_config = load_config(loaded)
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid config: {exc}", param_name="config") from exc
    return app_config.to_settings(), app_config.log_level


def _entity_filters(
    project: Optional[str],
    employer: Optional[str],
    university: Optional[str],
    certification: Optional[str],
) -> EntityFilters | None:
    refs = {
        "project": project,
        "employer": employer,
        "university": university,
        "certification": certification,
    }
    selected = {key: EntityRef(name=value) for key, value in refs.items() if value}
    return EntityFilters(**selected) if selected else None


def _echo_json(payload: Any) -> None:
    typer.echo(dump_json(payload))


@app.command()
def search(
    snapshot: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Snapshot JSON path."),
    criteria: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Criteria JSON or YAML path."
    ),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    as_of: Optional[str] = typer.Option(None, help="Reference date (YYYY-MM or ISO) for derived metrics."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    project: Optional[str] = typer.Option(None, help="Restrict to candidates on this project."),
    employer: Optional[str] = typer.Option(None, help="Restrict to candidates who worked at this employer."),
    university: Optional[str] = typer.Option(None, help="Restrict to candidates from this university."),
    certification: Optional[str] = typer.Option(None, help="Restrict to holders of this certification."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Filter and rank the candidates of a snapshot."""
    settings, configured_level = _load_settings(config)
    configure_logging(log_level or configured_level or "INFO")

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    try:
        results = pipeline.run(
            snapshot_path=snapshot,
            criteria_path=criteria,
            output_path=output,
            entity_filters=_entity_filters(project, employer, university, certification),
            as_of=as_of,
        )
    except (ValueError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_name="criteria") from exc
    typer.echo(f"Matched {len(results)} candidates. Results saved to {output}.")


@app.command()
def options(
    snapshot: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Snapshot JSON path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Print the deduplicated option lists of a snapshot."""
    configure_logging(log_level)
    container = create_container()
    loaded, _ = container.pipeline().load_snapshot(snapshot)
    _echo_json(container.search().options(loaded).to_dict())


@app.command()
def connections(
    snapshot: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Snapshot JSON path."),
    candidate_id: str = typer.Option(..., help="Candidate to find mutual connections for."),
    as_of: Optional[str] = typer.Option(None, help="Date used for ongoing periods."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Print mutual connections between a candidate and the home employer's people."""
    settings, _ = _load_settings(config)
    configure_logging(log_level)
    container = create_container(settings=settings)
    loaded, _ = container.pipeline().load_snapshot(snapshot)
    try:
        found = container.search().connections(loaded, candidate_id, as_of=as_of)
    except KeyError as exc:
        raise typer.BadParameter(f"Unknown candidate: {candidate_id}", param_name="candidate_id") from exc
    _echo_json([connection.to_dict() for connection in found])


def main() -> None:
    app()


if __name__ == "__main__":
    main()
