"""
Dish similarity scoring.

A candidate is compared with the target on up to three signals, each a
Jaccard overlap in [0, 1]:

* **name** (weight 40) - always counted.
* **ingredients** (weight 35) - counted only when both dishes list some
  non-blank ingredient.
* **description** (weight 25) - counted only when both dishes have one.

The final score is the weighted mean of the counted signals scaled to
0-100. A signal that is not counted drops out of the denominator too, so
a dish with no ingredient list is judged on name (and description) alone
rather than being marked down for it.
"""
from __future__ import annotations

import math
import re
from typing import Iterable

from .models import DishDescriptor

NAME_WEIGHT = 40
INGREDIENTS_WEIGHT = 35
DESCRIPTION_WEIGHT = 25

_MIN_TOKEN_LENGTH = 3
_NON_WORD = re.compile(r"\W+")


def tokenize(text: str | None) -> frozenset[str]:
    """Lower-cased word tokens of three or more characters."""
    if not text:
        return frozenset()
    return frozenset(
        tok for tok in _NON_WORD.split(text.lower()) if len(tok) >= _MIN_TOKEN_LENGTH
    )


def normalize_items(items: Iterable[str]) -> frozenset[str]:
    return frozenset(s for s in (item.strip().lower() for item in items) if s)


def jaccard(a: frozenset[str], b: frozenset[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score(target: DishDescriptor, candidate: DishDescriptor) -> int:
    """Similarity of ``candidate`` to ``target`` on a 0-100 scale."""
    evidence: list[tuple[float, int]] = [
        (jaccard(tokenize(target.name), tokenize(candidate.name)), NAME_WEIGHT),
    ]

    target_items = normalize_items(target.ingredients)
    candidate_items = normalize_items(candidate.ingredients)
    if target_items and candidate_items:
        evidence.append((jaccard(target_items, candidate_items), INGREDIENTS_WEIGHT))

    if target.description and candidate.description:
        evidence.append((
            jaccard(tokenize(target.description), tokenize(candidate.description)),
            DESCRIPTION_WEIGHT,
        ))

    total_weight = sum(w for _, w in evidence)
    if total_weight == 0:
        return 0
    weighted = sum(s * w for s, w in evidence)
    return _round_half_up(100 * weighted / total_weight)
