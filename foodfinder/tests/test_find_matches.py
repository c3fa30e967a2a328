from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from foodfinder.app import app
from foodfinder.matching.models import DishDescriptor, GeoPoint, MatchRequest, Restaurant
from foodfinder.matching.orchestrator import find_nearby_matches
from foodfinder.store.data_store import StoreUnavailable

client = TestClient(app)

DOWNTOWN_SF = {"latitude": 37.7749, "longitude": -122.4194}
MARGHERITA = {"name": "Margherita Pizza", "ingredients": ["tomato", "mozzarella", "basil"]}


def _search(**overrides):
    body = {"targetDish": MARGHERITA, "userLocation": DOWNTOWN_SF}
    body.update(overrides)
    return client.post("/dishes/find-matches", json=body)


# ── HTTP contract ────────────────────────────────────────────────────────


def test_find_matches_returns_ranked_nearby_dishes():
    resp = _search()
    assert resp.status_code == 200
    body = resp.json()

    assert body["message"] == "Found 3 matching dishes"
    assert [(m["id"], m["similarity"]) for m in body["matches"]] == [
        ("d2", 100),
        ("d1", 88),
        ("d6", 41),
    ]
    assert body["searchParams"] == {
        "maxDistance": 10.0,
        "minSimilarity": 30,
        "maxPrice": None,
        "restaurantsSearched": 4,
    }


def test_matches_are_enriched_with_restaurant_and_distance():
    body = _search().json()
    top = body["matches"][0]

    assert top["restaurantId"] == "r3"
    assert top["restaurant"]["id"] == "r3"
    assert top["restaurant"]["name"] == "Pizzeria Delfina"
    assert top["restaurant"]["cuisineType"] == "Italian"
    assert top["restaurant"]["rating"] == 4.4
    assert 1.0 < top["restaurant"]["distance"] < 2.0


def test_out_of_range_restaurant_is_not_matched():
    ids = [m["id"] for m in _search().json()["matches"]]
    assert "d4" not in ids  # Oakland, ~13 km away


def test_equal_scores_tie_break_nearest_first():
    body = _search(maxDistance=20).json()
    perfect = [m for m in body["matches"] if m["similarity"] == 100]
    assert [m["id"] for m in perfect] == ["d2", "d4"]
    assert perfect[0]["restaurant"]["distance"] < perfect[1]["restaurant"]["distance"]


def test_max_price_filters_and_excludes_unpriced():
    body = _search(maxPrice=17).json()
    assert [m["id"] for m in body["matches"]] == ["d2"]
    assert body["searchParams"]["maxPrice"] == 17


def test_min_similarity_threshold():
    body = _search(minSimilarity=90).json()
    assert [m["id"] for m in body["matches"]] == ["d2"]
    assert all(m["similarity"] >= 90 for m in body["matches"])


def test_small_radius_narrows_restaurants():
    body = _search(maxDistance=2).json()
    assert body["searchParams"]["restaurantsSearched"] == 2
    assert [m["id"] for m in body["matches"]] == ["d2"]


def test_no_nearby_restaurants_is_an_empty_success():
    resp = _search(userLocation={"latitude": 0, "longitude": 0})
    assert resp.status_code == 200
    body = resp.json()
    assert body["matches"] == []
    assert body["message"] == "No restaurants found within the specified distance"
    assert body["searchParams"]["restaurantsSearched"] == 0


def test_no_qualifying_dishes_is_an_empty_success():
    resp = _search(targetDish={"name": "Beef Wellington"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["matches"] == []
    assert body["searchParams"]["restaurantsSearched"] == 4


# ── Validation ───────────────────────────────────────────────────────────


def test_rejects_missing_target_name():
    resp = client.post(
        "/dishes/find-matches",
        json={"targetDish": {"ingredients": ["tomato"]}, "userLocation": DOWNTOWN_SF},
    )
    assert resp.status_code == 422


def test_rejects_blank_target_name():
    assert _search(targetDish={"name": "   "}).status_code == 422


def test_rejects_missing_location():
    resp = client.post("/dishes/find-matches", json={"targetDish": MARGHERITA})
    assert resp.status_code == 422


def test_rejects_missing_longitude():
    assert _search(userLocation={"latitude": 37.7}).status_code == 422


def test_rejects_out_of_range_latitude():
    assert _search(userLocation={"latitude": 91, "longitude": 0}).status_code == 422


def test_rejects_bad_min_similarity():
    assert _search(minSimilarity=101).status_code == 422
    assert _search(minSimilarity=-1).status_code == 422


# ── Upstream failures ────────────────────────────────────────────────────


@patch("foodfinder.matching.orchestrator.find_matches")
@patch(
    "foodfinder.matching.orchestrator.list_restaurants",
    side_effect=StoreUnavailable("restaurants.csv is missing"),
)
def test_store_failure_is_a_structured_error(mock_list, mock_find):
    resp = _search()
    assert resp.status_code == 500
    assert resp.json() == {
        "error": "Restaurant data unavailable",
        "details": "restaurants.csv is missing",
    }
    mock_find.assert_not_called()


# ── Orchestrator with an in-memory store ─────────────────────────────────


_RESTAURANTS = [
    Restaurant(id="far", name="Far", location=GeoPoint(latitude=0.05, longitude=0.0)),
    Restaurant(id="near", name="Near", location=GeoPoint(latitude=0.01, longitude=0.0)),
]
_DISHES = [
    DishDescriptor(id="a", restaurant_id="far", name="Pad Thai", price=10),
    DishDescriptor(id="b", restaurant_id="near", name="Pad Thai", price=11),
    DishDescriptor(id="c", restaurant_id="near", name="Green Curry", price=9),
]


@patch("foodfinder.matching.orchestrator.list_dishes_by_restaurant", return_value=_DISHES)
@patch("foodfinder.matching.orchestrator.list_restaurants", return_value=_RESTAURANTS)
def test_orchestrator_orders_candidates_by_distance(mock_restaurants, mock_dishes):
    request = MatchRequest(
        target_dish=DishDescriptor(name="Pad Thai"),
        user_location=GeoPoint(latitude=0.0, longitude=0.0),
    )
    response = find_nearby_matches(request)

    assert [m.id for m in response.matches] == ["b", "a"]
    assert response.matches[0].restaurant.name == "Near"
    assert response.search_params.restaurants_searched == 2
    assert set(mock_dishes.call_args.args[0]) == {"near", "far"}


@patch("foodfinder.matching.orchestrator.list_dishes_by_restaurant")
@patch("foodfinder.matching.orchestrator.list_restaurants", return_value=_RESTAURANTS)
def test_orchestrator_skips_dish_lookup_when_nothing_nearby(mock_restaurants, mock_dishes):
    request = MatchRequest(
        target_dish=DishDescriptor(name="Pad Thai"),
        user_location=GeoPoint(latitude=45.0, longitude=45.0),
    )
    response = find_nearby_matches(request)

    assert response.matches == []
    mock_dishes.assert_not_called()


def test_negative_max_price_is_an_empty_success():
    resp = _search(maxPrice=-1)
    assert resp.status_code == 200
    body = resp.json()
    assert body["matches"] == []
    assert body["searchParams"]["maxPrice"] == -1
