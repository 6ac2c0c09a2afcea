"""Reference-collection indexes and shared lookup tables."""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from typing import Iterable, TypeVar

from ..schemas import (
    Candidate,
    Certification,
    DatasetSnapshot,
    Employer,
    Project,
    University,
    UniversityLocation,
)
from .normalize import normalize_key

T = TypeVar("T")


def _index_by_name(records: Iterable[T], attribute: str) -> dict[str, T]:
    index: dict[str, T] = {}
    for record in records:
        key = normalize_key(getattr(record, attribute))
        # first record wins for duplicate names
        if key and key not in index:
            index[key] = record
    return index


class ReferenceData:
    """Hash indexes over the canonical collections.

    Employers, projects and certifications are joined by normalized name;
    universities are joined by campus location id.
    """

    def __init__(
        self,
        *,
        projects: Iterable[Project] = (),
        employers: Iterable[Employer] = (),
        universities: Iterable[University] = (),
        certifications: Iterable[Certification] = (),
    ) -> None:
        self._projects = _index_by_name(projects, "project_name")
        self._employers = _index_by_name(employers, "name")
        self._certifications = _index_by_name(certifications, "certification_name")
        self._universities: dict[str, University] = {}
        self._campuses: dict[str, tuple[University, UniversityLocation]] = {}
        for university in universities:
            if university.id and university.id not in self._universities:
                self._universities[university.id] = university
            for location in university.locations:
                self._campuses.setdefault(location.id, (university, location))

    @classmethod
    def from_snapshot(cls, snapshot: DatasetSnapshot) -> "ReferenceData":
        return cls(
            projects=snapshot.projects,
            employers=snapshot.employers,
            universities=snapshot.universities,
            certifications=snapshot.certifications,
        )

    def project(self, name: str | None) -> Project | None:
        return self._projects.get(normalize_key(name))

    def employer(self, name: str | None) -> Employer | None:
        return self._employers.get(normalize_key(name))

    def certification(self, name: str | None) -> Certification | None:
        return self._certifications.get(normalize_key(name))

    def university(self, university_id: str | None) -> University | None:
        if not university_id:
            return None
        return self._universities.get(university_id)

    def campus(self, location_id: str | None) -> tuple[University, UniversityLocation] | None:
        if not location_id:
            return None
        return self._campuses.get(location_id)


@dataclass(frozen=True, slots=True)
class OptionTables:
    """Deduplicated option lists derived from one snapshot."""

    cities: list[str]
    job_titles: list[str]
    tech_stacks: list[str]
    domains: list[str]
    shift_types: list[str]
    work_modes: list[str]
    time_support_zones: list[str]
    employer_names: list[str]
    employer_types: list[str]
    project_names: list[str]
    vertical_domains: list[str]
    horizontal_domains: list[str]
    technical_aspects: list[str]
    certification_names: list[str]

    def to_dict(self) -> dict[str, list[str]]:
        return asdict(self)


def _unique(values: Iterable[str | None]) -> list[str]:
    seen: dict[str, str] = {}
    for value in values:
        if not value or not value.strip():
            continue
        seen.setdefault(normalize_key(value), value.strip())
    return sorted(seen.values(), key=str.casefold)


def build_option_tables(snapshot: DatasetSnapshot) -> OptionTables:
    candidates: list[Candidate] = snapshot.candidates
    experiences = [exp for candidate in candidates for exp in candidate.work_experiences]
    return OptionTables(
        cities=_unique(candidate.city for candidate in candidates),
        job_titles=_unique(exp.job_title for exp in experiences),
        tech_stacks=_unique(
            [tech for exp in experiences for tech in exp.tech_stacks]
            + [tech for project in snapshot.projects for tech in project.tech_stacks]
        ),
        domains=_unique(domain for exp in experiences for domain in exp.domains),
        shift_types=_unique(exp.shift_type for exp in experiences),
        work_modes=_unique(exp.work_mode for exp in experiences),
        time_support_zones=_unique(zone for exp in experiences for zone in exp.time_support_zones),
        employer_names=_unique(
            [employer.name for employer in snapshot.employers]
            + [exp.employer_name for exp in experiences]
        ),
        employer_types=_unique(employer.employer_type for employer in snapshot.employers),
        project_names=_unique(project.project_name for project in snapshot.projects),
        vertical_domains=_unique(d for project in snapshot.projects for d in project.vertical_domains),
        horizontal_domains=_unique(d for project in snapshot.projects for d in project.horizontal_domains),
        technical_aspects=_unique(a for project in snapshot.projects for a in project.technical_aspects),
        certification_names=_unique(cert.certification_name for cert in snapshot.certifications),
    )


class OptionIndex:
    """Lazily built, explicitly invalidated option tables.

    Rebuilt on first access after :meth:`invalidate` or when a different
    snapshot object is supplied.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: DatasetSnapshot | None = None
        self._tables: OptionTables | None = None
        self.builds = 0

    def get(self, snapshot: DatasetSnapshot) -> OptionTables:
        with self._lock:
            if self._tables is None or self._snapshot is not snapshot:
                self._tables = build_option_tables(snapshot)
                self._snapshot = snapshot
                self.builds += 1
            return self._tables

    def invalidate(self) -> None:
        with self._lock:
            self._tables = None
            self._snapshot = None
