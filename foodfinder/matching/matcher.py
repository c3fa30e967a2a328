from __future__ import annotations

from typing import Iterable, Sequence

from .config import DEFAULT_MATCH_CONFIG
from .models import DishDescriptor, ScoredMatch
from .similarity import score


def find_matches(
    target: DishDescriptor,
    candidates: Iterable[DishDescriptor],
    min_similarity: int = DEFAULT_MATCH_CONFIG.default_min_similarity,
) -> list[ScoredMatch]:
    """
    Score every candidate against ``target`` and return those scoring at
    least ``min_similarity``, best first.

    Equal scores keep the order the candidates came in, so callers that
    pass candidates nearest-first get a nearest-first tie-break.
    """
    scored = [
        ScoredMatch(**dish.model_dump(exclude={"similarity"}), similarity=score(target, dish))
        for dish in candidates
    ]
    kept = [m for m in scored if m.similarity >= min_similarity]
    return sorted(kept, key=lambda m: m.similarity, reverse=True)


def filter_by_price(
    matches: Sequence[ScoredMatch],
    max_price: float | None,
) -> list[ScoredMatch]:
    """Drop matches above ``max_price``; unpriced dishes go too once a ceiling is set."""
    if max_price is None:
        return list(matches)
    return [m for m in matches if m.price is not None and m.price <= max_price]
