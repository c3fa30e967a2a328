"""
Dish search workflow.

Responsibilities:
- Narrow the restaurant dataset to the user's search radius.
- Load the menus of the nearby restaurants.
- Score, threshold, rank and price-filter their dishes.
- Attach restaurant details and distance to every match.
"""
from __future__ import annotations

import logging
import time

from ..store.data_store import list_dishes_by_restaurant, list_restaurants
from .matcher import filter_by_price, find_matches
from .models import (
    MatchedDish,
    MatchRequest,
    MatchResponse,
    ProximityAnnotated,
    Restaurant,
    RestaurantSummary,
    SearchParams,
)
from .proximity import filter_by_distance

logger = logging.getLogger(__name__)


def _summary(nearby: ProximityAnnotated[Restaurant]) -> RestaurantSummary:
    restaurant = nearby.item
    return RestaurantSummary(
        id=restaurant.id,
        name=restaurant.name,
        address=restaurant.address,
        cuisine_type=restaurant.cuisine_type,
        rating=restaurant.rating,
        distance=round(nearby.distance_km, 3),
    )


def find_nearby_matches(request: MatchRequest) -> MatchResponse:
    start_time = time.time()

    # --- Restaurants within the radius, nearest first ---
    nearby = filter_by_distance(list_restaurants(), request.user_location, request.max_distance)

    def _params() -> SearchParams:
        return SearchParams(
            max_distance=request.max_distance,
            min_similarity=request.min_similarity,
            max_price=request.max_price,
            restaurants_searched=len(nearby),
        )

    if not nearby:
        logger.info("No restaurants within %.1f km of the search origin", request.max_distance)
        return MatchResponse(
            message="No restaurants found within the specified distance",
            matches=[],
            search_params=_params(),
        )

    # --- Candidate dishes, ordered by their restaurant's distance ---
    by_id = {n.item.id: n for n in nearby}
    rank = {rid: i for i, rid in enumerate(by_id)}
    candidates = sorted(
        (d for d in list_dishes_by_restaurant(by_id) if d.restaurant_id in by_id),
        key=lambda d: rank[d.restaurant_id],
    )

    # --- Score, threshold and price ceiling ---
    matches = find_matches(request.target_dish, candidates, request.min_similarity)
    matches = filter_by_price(matches, request.max_price)

    items = [
        MatchedDish(
            **m.model_dump(),
            restaurant=_summary(by_id[m.restaurant_id]),
        )
        for m in matches
    ]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Matched %r: %d dishes from %d candidates at %d restaurants in %.1f ms",
        request.target_dish.name,
        len(items),
        len(candidates),
        len(nearby),
        elapsed_ms,
    )

    return MatchResponse(
        message=f"Found {len(items)} matching dishes",
        matches=items,
        search_params=_params(),
    )
