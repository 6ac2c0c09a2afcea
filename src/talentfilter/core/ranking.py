"""Final ordering of filtered candidates."""

from __future__ import annotations

import unicodedata
from typing import Mapping, Sequence

from ..schemas import Candidate
from .results import MatchContext


def name_sort_key(name: str | None) -> tuple[str, str]:
    """Accent- and case-insensitive key with the raw name as tie-breaker."""
    text = name or ""
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()
    return folded, text


def rank(
    candidates: Sequence[Candidate],
    match_contexts: Mapping[str, MatchContext],
    *,
    active: bool,
) -> list[Candidate]:
    """Sort by total matches descending, then by name.

    Without an active filter the input order is kept as is.
    """
    if not active:
        return list(candidates)

    def sort_key(candidate: Candidate) -> tuple[int, tuple[str, str]]:
        match_context = match_contexts.get(candidate.id)
        total = match_context.total_matches if match_context is not None else 0
        return -total, name_sort_key(candidate.name)

    return sorted(candidates, key=sort_key)
