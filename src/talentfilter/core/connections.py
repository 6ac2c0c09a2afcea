"""Mutual connections between a candidate and people at the home employer.

Two people are connected when they studied at the same campus or worked at
the same employer during overlapping periods.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Sequence

from ..schemas import Candidate, CandidateEducation, WorkExperience
from .normalize import normalize_key

DAYS_PER_MONTH = 30.44

ConnectionType = Literal["education", "work", "both"]


def date_ranges_overlap(
    start1: date | None,
    end1: date | None,
    start2: date | None,
    end2: date | None,
    today: date,
    tolerance_months: float = 0,
) -> bool:
    """Whether two ranges overlap, or sit within ``tolerance_months`` of each other.

    A range without a start never overlaps; a missing end means ``today``.
    """
    if start1 is None or start2 is None:
        return False
    overlap_start = max(start1, start2)
    overlap_end = min(end1 or today, end2 or today)
    if overlap_start <= overlap_end:
        return True
    if tolerance_months > 0:
        gap_months = (overlap_start.toordinal() - overlap_end.toordinal()) / DAYS_PER_MONTH
        return gap_months <= tolerance_months
    return False


def _overlap_window(
    start1: date | None,
    end1: date | None,
    start2: date | None,
    end2: date | None,
    today: date,
) -> tuple[date, date]:
    return max(start1 or today, start2 or today), min(end1 or today, end2 or today)


@dataclass(slots=True)
class EducationOverlap:
    university_location_id: str
    university_location_name: str
    education: CandidateEducation
    other_education: CandidateEducation
    overlap_start: date
    overlap_end: date


@dataclass(slots=True)
class WorkOverlap:
    employer_name: str
    experience: WorkExperience
    other_experience: WorkExperience
    overlap_start: date
    overlap_end: date


@dataclass(slots=True)
class MutualConnection:
    connection: Candidate
    connection_type: ConnectionType
    education_overlaps: list[EducationOverlap] = field(default_factory=list)
    work_overlaps: list[WorkOverlap] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "candidate_id": self.connection.id,
            "name": self.connection.name,
            "connection_type": self.connection_type,
            "education_overlaps": [
                {
                    "university_location_id": overlap.university_location_id,
                    "university_location_name": overlap.university_location_name,
                    "overlap_start": overlap.overlap_start,
                    "overlap_end": overlap.overlap_end,
                }
                for overlap in self.education_overlaps
            ],
            "work_overlaps": [
                {
                    "employer_name": overlap.employer_name,
                    "overlap_start": overlap.overlap_start,
                    "overlap_end": overlap.overlap_end,
                }
                for overlap in self.work_overlaps
            ],
        }


def overlapping_education(
    first: Candidate,
    second: Candidate,
    *,
    today: date,
    tolerance_months: float = 0,
) -> list[EducationOverlap]:
    overlaps: list[EducationOverlap] = []
    for education in first.educations:
        for other in second.educations:
            if not education.university_location_id:
                continue
            if education.university_location_id != other.university_location_id:
                continue
            if not date_ranges_overlap(
                education.start_month,
                education.end_month,
                other.start_month,
                other.end_month,
                today,
                tolerance_months,
            ):
                continue
            start, end = _overlap_window(
                education.start_month, education.end_month, other.start_month, other.end_month, today
            )
            overlaps.append(
                EducationOverlap(
                    university_location_id=education.university_location_id,
                    university_location_name=education.university_location_name,
                    education=education,
                    other_education=other,
                    overlap_start=start,
                    overlap_end=end,
                )
            )
    return overlaps


def overlapping_work(
    first: Candidate,
    second: Candidate,
    *,
    today: date,
    tolerance_months: float = 0,
) -> list[WorkOverlap]:
    overlaps: list[WorkOverlap] = []
    for experience in first.work_experiences:
        employer = normalize_key(experience.employer_name)
        if not employer:
            continue
        for other in second.work_experiences:
            if normalize_key(other.employer_name) != employer:
                continue
            if not date_ranges_overlap(
                experience.start_date,
                experience.end_date,
                other.start_date,
                other.end_date,
                today,
                tolerance_months,
            ):
                continue
            start, end = _overlap_window(
                experience.start_date, experience.end_date, other.start_date, other.end_date, today
            )
            overlaps.append(
                WorkOverlap(
                    employer_name=experience.employer_name,
                    experience=experience,
                    other_experience=other,
                    overlap_start=start,
                    overlap_end=end,
                )
            )
    return overlaps


def worked_at(candidate: Candidate, employer_name: str) -> bool:
    target = normalize_key(employer_name)
    return any(normalize_key(exp.employer_name) == target for exp in candidate.work_experiences)


def find_mutual_connections(
    candidate: Candidate,
    pool: Sequence[Candidate],
    *,
    home_employer: str,
    today: date,
    tolerance_months: float = 0,
) -> list[MutualConnection]:
    """People from ``pool`` who worked at ``home_employer`` and overlap with ``candidate``."""
    connections: list[MutualConnection] = []
    for other in pool:
        if other.id == candidate.id or not worked_at(other, home_employer):
            continue
        education = overlapping_education(
            candidate, other, today=today, tolerance_months=tolerance_months
        )
        work = overlapping_work(candidate, other, today=today, tolerance_months=tolerance_months)
        if not education and not work:
            continue
        if education and work:
            connection_type: ConnectionType = "both"
        elif work:
            connection_type = "work"
        else:
            connection_type = "education"
        connections.append(
            MutualConnection(
                connection=other,
                connection_type=connection_type,
                education_overlaps=education,
                work_overlaps=work,
            )
        )
    return connections
