"""Search pipeline assembly and execution."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import pendulum
import structlog
import yaml
from pydantic import BaseModel, ValidationError

from .core import CandidateSearch
from .schemas import (
    Candidate,
    Certification,
    DatasetSnapshot,
    Employer,
    EntityFilters,
    FilterCriteria,
    Project,
    University,
)
from . import __version__

COLLECTIONS: dict[str, type[BaseModel]] = {
    "candidates": Candidate,
    "projects": Project,
    "employers": Employer,
    "universities": University,
    "certifications": Certification,
}


class SnapshotLoadError(ValueError):
    """Raised when snapshot loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: DatasetSnapshot):
        super().__init__("Snapshot loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Snapshot loading failed: {self.errors}"


class SnapshotLoader:
    """Load a dataset snapshot, validating each record on its own."""

    def load(self, path: Path) -> DatasetSnapshot:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid snapshot JSON: {exc}") from exc
        return self.parse(data)

    def parse(self, data: Any) -> DatasetSnapshot:
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object")

        collections: dict[str, list[BaseModel]] = {}
        errors: list[str] = []
        for name, model in COLLECTIONS.items():
            records = data.get(name) or []
            if not isinstance(records, list):
                errors.append(f"{name}: expected a list")
                collections[name] = []
                continue
            valid: list[BaseModel] = []
            seen_ids: set[str] = set()
            for idx, record in enumerate(records):
                try:
                    parsed = model.model_validate(record)
                except ValidationError as exc:
                    errors.append(f"{name}[{idx}]: {_first_error(exc)}")
                    continue
                if name == "candidates":
                    # the first candidate with a given id wins
                    if parsed.id in seen_ids:
                        errors.append(f"{name}[{idx}]: duplicate id {parsed.id!r}")
                        continue
                    seen_ids.add(parsed.id)
                valid.append(parsed)
            collections[name] = valid

        snapshot = DatasetSnapshot(**collections)
        if errors:
            raise SnapshotLoadError(errors, snapshot)
        return snapshot


def _first_error(exc: ValidationError) -> str:
    details = exc.errors()
    if not details:
        return str(exc)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid")
    suffix = f" (+{len(details) - 1} more)" if len(details) > 1 else ""
    return f"{location}: {message}{suffix}" if location else f"{message}{suffix}"


class CriteriaLoader:
    """Load filter criteria from JSON or YAML."""

    def load(self, path: Path) -> FilterCriteria:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in {".yaml", ".yml"}:
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid criteria YAML: {exc}") from exc
        else:
            try:
                data = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid criteria JSON: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("Criteria must be a mapping")
        return FilterCriteria.model_validate(data)


def dump_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default)


class OutputWriter:
    """Persist search results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_json(payload), encoding="utf-8")


class SearchPipeline:
    """End-to-end search orchestrator."""

    def __init__(
        self,
        *,
        search: CandidateSearch,
        snapshot_loader: SnapshotLoader | None = None,
        criteria_loader: CriteriaLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._search = search
        self._snapshots = snapshot_loader or SnapshotLoader()
        self._criteria = criteria_loader or CriteriaLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def load_snapshot(self, path: Path) -> tuple[DatasetSnapshot, list[str]]:
        try:
            return self._snapshots.load(path), []
        except SnapshotLoadError as exc:
            self._logger.warning("snapshot.partial_load", errors=exc.errors)
            return exc.partial, list(exc.errors)

    def run(
        self,
        *,
        snapshot_path: Path,
        criteria_path: Path,
        output_path: Path,
        entity_filters: EntityFilters | None = None,
        as_of: str | None = None,
    ) -> list[dict]:
        criteria = self._criteria.load(criteria_path)
        snapshot, load_errors = self.load_snapshot(snapshot_path)

        result = self._search.search(snapshot, criteria, entity_filters=entity_filters, as_of=as_of)

        serialized_results: list[dict] = []
        for candidate in result.candidates:
            entry: dict[str, Any] = {"candidate_id": candidate.id, "name": candidate.name}
            match_context = result.match_contexts.get(candidate.id)
            if match_context is not None:
                entry["match_context"] = match_context.to_dict()
            serialized_results.append(
                json.loads(json.dumps(entry, default=_json_default, ensure_ascii=False))
            )

        metadata = {
            "candidate_count": len(snapshot.candidates),
            "matched_count": len(serialized_results),
            "active_filters": criteria.active_fields(),
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": serialized_results})
        return serialized_results


def _json_default(value):  # type: ignore[override]
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
