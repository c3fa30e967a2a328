from __future__ import annotations

from typing import Iterable, Protocol, TypeVar

from .geo import distance_km
from .models import GeoPoint, ProximityAnnotated


class Locatable(Protocol):
    location: GeoPoint


L = TypeVar("L", bound=Locatable)


def filter_by_distance(
    items: Iterable[L],
    origin: GeoPoint,
    max_distance_km: float | None,
) -> list[ProximityAnnotated[L]]:
    """
    Annotate each item with its distance from ``origin`` and keep those
    within ``max_distance_km``, nearest first.

    ``max_distance_km=None`` keeps everything. Ties keep input order.
    """
    annotated = [
        ProximityAnnotated(item=item, distance_km=distance_km(origin, item.location))
        for item in items
    ]
    if max_distance_km is not None:
        annotated = [a for a in annotated if a.distance_km <= max_distance_km]
    return sorted(annotated, key=lambda a: a.distance_km)
