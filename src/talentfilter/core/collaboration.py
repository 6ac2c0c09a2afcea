"""Timeline matcher deciding whether two people worked on the same project."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from ..schemas import Candidate, WorkExperience
from .normalize import key_set, normalize_key
from .reference import ReferenceData

DEFAULT_TOLERANCE_DAYS = 30

ExperiencePredicate = Callable[[WorkExperience], bool]


@dataclass(frozen=True, slots=True)
class Collaboration:
    """One shared project between two people."""

    partner_id: str
    partner_name: str
    project_name: str
    employer_name: str | None
    standalone: bool = False


def day_difference(first: date, second: date) -> int:
    return abs(first.toordinal() - second.toordinal())


def _within_tolerance(
    experience_a: WorkExperience,
    experience_b: WorkExperience,
    project_name: str,
    reference: ReferenceData,
    tolerance_days: int,
) -> bool:
    if experience_a.start_date is None or experience_b.start_date is None:
        return False
    project = reference.project(project_name)
    if project is None or project.start_date is None:
        return False
    return (
        day_difference(experience_a.start_date, project.start_date) <= tolerance_days
        and day_difference(experience_b.start_date, project.start_date) <= tolerance_days
    )


def find_collaborations(
    person_a: Candidate,
    person_b: Candidate,
    *,
    reference: ReferenceData,
    tolerance_days: int | None = DEFAULT_TOLERANCE_DAYS,
    employer_filter: Iterable[str] = (),
    target_experience: ExperiencePredicate | None = None,
    include_standalone: bool = True,
    first_only: bool = False,
) -> list[Collaboration]:
    """Shared employer-and-project pairs between ``person_a`` and ``person_b``.

    Only ``person_b`` experiences accepted by ``target_experience`` take part.
    With a tolerance, both start dates must fall within ``tolerance_days`` of
    the canonical project start. Standalone projects match by name alone and
    are skipped whenever an employer filter is given.
    """
    employer_keys = key_set(employer_filter)
    found: list[Collaboration] = []
    seen: set[tuple[str, str]] = set()

    experiences_b = [
        exp for exp in person_b.work_experiences if target_experience is None or target_experience(exp)
    ]
    for experience_a in person_a.work_experiences:
        employer = normalize_key(experience_a.employer_name)
        if not employer or (employer_keys and employer not in employer_keys):
            continue
        for experience_b in experiences_b:
            if normalize_key(experience_b.employer_name) != employer:
                continue
            names_b = {normalize_key(ref.project_name) for ref in experience_b.projects}
            for reference_a in experience_a.projects:
                project_key = normalize_key(reference_a.project_name)
                if not project_key or project_key not in names_b or (employer, project_key) in seen:
                    continue
                if tolerance_days is not None and not _within_tolerance(
                    experience_a, experience_b, reference_a.project_name, reference, tolerance_days
                ):
                    continue
                seen.add((employer, project_key))
                found.append(
                    Collaboration(
                        partner_id=person_b.id,
                        partner_name=person_b.name,
                        project_name=reference_a.project_name,
                        employer_name=experience_a.employer_name,
                    )
                )
                if first_only:
                    return found

    if include_standalone and not employer_keys:
        names_b = {normalize_key(ref.project_name) for ref in person_b.projects}
        for reference_a in person_a.projects:
            project_key = normalize_key(reference_a.project_name)
            if project_key and project_key in names_b and ("", project_key) not in seen:
                seen.add(("", project_key))
                found.append(
                    Collaboration(
                        partner_id=person_b.id,
                        partner_name=person_b.name,
                        project_name=reference_a.project_name,
                        employer_name=None,
                        standalone=True,
                    )
                )
                if first_only:
                    return found

    return found


def worked_together(
    person_a: Candidate,
    person_b: Candidate,
    *,
    reference: ReferenceData,
    tolerance_days: int | None = DEFAULT_TOLERANCE_DAYS,
    employer_filter: Iterable[str] = (),
    target_experience: ExperiencePredicate | None = None,
    include_standalone: bool = True,
) -> bool:
    return bool(
        find_collaborations(
            person_a,
            person_b,
            reference=reference,
            tolerance_days=tolerance_days,
            employer_filter=employer_filter,
            target_experience=target_experience,
            include_standalone=include_standalone,
            first_only=True,
        )
    )
