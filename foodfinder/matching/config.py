from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchConfig:
    default_max_distance_km: float = 10.0
    default_min_similarity: int = 30
    default_nearby_radius_km: float = 5.0


DEFAULT_MATCH_CONFIG = MatchConfig()
