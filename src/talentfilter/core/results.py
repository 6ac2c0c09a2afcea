"""Predicate results and match-explanation payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

CategoryType = Literal[
    "basic",
    "experience",
    "projects",
    "employers",
    "education",
    "certifications",
    "achievements",
    "collaboration",
]

CATEGORY_LABELS: dict[CategoryType, str] = {
    "basic": "Basic Information",
    "experience": "Work History",
    "projects": "Project Expertise",
    "employers": "Employer Experience",
    "education": "Education Background",
    "certifications": "Certifications",
    "achievements": "Achievements",
    "collaboration": "Collaboration",
}


@dataclass(frozen=True, slots=True)
class Criterion:
    """One matched filter field and the values that satisfied it."""

    type: str
    label: str
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Evidence:
    """A criterion attributed to a subject (project, employer, ...).

    ``key`` identifies the underlying record when several records share a
    display subject, such as two stints at one employer.
    """

    category: CategoryType
    subject: str
    criterion: Criterion
    key: str = ""
    context: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True, slots=True)
class PredicateResult:
    """Boolean outcome of one filter field plus the evidence behind it."""

    name: str
    matched: bool
    evidence: tuple[Evidence, ...] = ()

    @classmethod
    def of(cls, name: str, matched: bool, evidence: Iterable[Evidence] = ()) -> "PredicateResult":
        return cls(name=name, matched=matched, evidence=tuple(evidence))

    @classmethod
    def not_applicable(cls, name: str) -> "PredicateResult":
        return cls(name=name, matched=True)


def evidence(
    category: CategoryType,
    subject: str,
    type_: str,
    label: str,
    values: Iterable[Any],
    *,
    key: str = "",
    **context: Any,
) -> Evidence:
    return Evidence(
        category=category,
        subject=subject,
        criterion=Criterion(type=type_, label=label, values=tuple(str(v) for v in values)),
        key=key,
        context=context,
    )


@dataclass(slots=True)
class MatchItem:
    name: str
    matched_criteria: list[Criterion]
    context: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class MatchCategory:
    type: CategoryType
    label: str
    items: list[MatchItem]

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass(slots=True)
class MatchContext:
    """Per-candidate match explanation used for ranking and display."""

    candidate_id: str
    total_matches: int
    categories: list[MatchCategory]

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "total_matches": self.total_matches,
            "categories": [
                {
                    "type": category.type,
                    "label": category.label,
                    "count": category.count,
                    "items": [
                        {
                            "name": item.name,
                            "matched_criteria": [
                                {
                                    "type": criterion.type,
                                    "label": criterion.label,
                                    "values": list(criterion.values),
                                }
                                for criterion in item.matched_criteria
                            ],
                            "context": item.context,
                        }
                        for item in category.items
                    ],
                }
                for category in self.categories
            ],
        }
