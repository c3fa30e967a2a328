from __future__ import annotations

import logging

from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .ai.groq_client import AnalysisFailed, analyze_image, analyze_text, get_nutrition_info
from .matching.config import DEFAULT_MATCH_CONFIG
from .matching.models import (
    AnalysisResponse,
    ErrorResponse,
    GeoPoint,
    MatchRequest,
    MatchResponse,
    RestaurantListResponse,
    RestaurantOut,
    TextAnalysisRequest,
)
from .matching.orchestrator import find_nearby_matches
from .matching.proximity import filter_by_distance
from .store.data_store import (
    StoreUnavailable,
    get_dish,
    get_restaurant,
    list_menu,
    list_restaurants,
)
from .uploads import MAX_IMAGE_BYTES, UploadRejected, validate_image_upload

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(title="Dish Finder API", version=API_VERSION)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error handlers ───────────────────────────────────────────────────────


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("Store unavailable on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Restaurant data unavailable", details=str(exc)).model_dump(),
    )


@app.exception_handler(AnalysisFailed)
async def analysis_failed_handler(request: Request, exc: AnalysisFailed) -> JSONResponse:
    logger.error("Dish analysis failed on %s: %s", request.url.path, exc.reason)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Failed to analyze dish", details=exc.reason).model_dump(),
    )


@app.exception_handler(UploadRejected)
async def upload_rejected_handler(request: Request, exc: UploadRejected) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error="Invalid upload", details=str(exc)).model_dump(),
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {
        "message": "Dish Finder API",
        "version": API_VERSION,
        "endpoints": {
            "health": "/health",
            "dishes": "/dishes",
            "restaurants": "/restaurants",
        },
    }


# ── Dish endpoints ───────────────────────────────────────────────────────


@app.post("/dishes/analyze-image", response_model=AnalysisResponse)
def analyze_image_upload(image: UploadFile = File(...)) -> AnalysisResponse:
    if image.size is not None and image.size > MAX_IMAGE_BYTES:
        raise UploadRejected("File too large. Maximum size is 10MB.")
    data = image.file.read(MAX_IMAGE_BYTES + 1)
    validate_image_upload(image.filename, image.content_type, data)
    dish = analyze_image(data, image.content_type or "image/jpeg")
    return AnalysisResponse(message="Image analyzed successfully", dish=dish)


@app.post("/dishes/analyze-text", response_model=AnalysisResponse)
def analyze_description(body: TextAnalysisRequest) -> AnalysisResponse:
    description = body.description.strip()
    if not description:
        raise HTTPException(status_code=400, detail="Please provide a food description")
    dish = analyze_text(description)
    return AnalysisResponse(message="Description analyzed successfully", dish=dish)


@app.post("/dishes/find-matches", response_model=MatchResponse)
def find_matches_route(body: MatchRequest) -> MatchResponse:
    return find_nearby_matches(body)


@app.get("/dishes/nutrition/{dish_name}")
def nutrition(dish_name: str) -> dict:
    if not dish_name.strip():
        raise HTTPException(status_code=400, detail="Please provide a dish name")
    return {"nutrition": get_nutrition_info(dish_name.strip())}


@app.get("/dishes/{dish_id}")
def dish_detail(dish_id: str) -> dict:
    dish = get_dish(dish_id)
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    restaurant = get_restaurant(dish.restaurant_id) if dish.restaurant_id else None
    return {
        "dish": dish.model_dump(by_alias=True),
        "restaurant": restaurant.model_dump(by_alias=True) if restaurant else None,
    }


# ── Restaurant endpoints ─────────────────────────────────────────────────


def _origin(latitude: float | None, longitude: float | None) -> GeoPoint | None:
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise HTTPException(status_code=400, detail="Please provide both latitude and longitude")
    return GeoPoint(latitude=latitude, longitude=longitude)


@app.get("/restaurants", response_model=RestaurantListResponse)
def restaurants(
    latitude: float | None = Query(default=None, ge=-90.0, le=90.0),
    longitude: float | None = Query(default=None, ge=-180.0, le=180.0),
    max_distance: float | None = Query(default=None, alias="maxDistance", ge=0.0),
    cuisine_type: str | None = Query(default=None, alias="cuisineType"),
) -> RestaurantListResponse:
    found = list_restaurants(cuisine_type=cuisine_type)
    origin = _origin(latitude, longitude)

    if origin is None:
        items = [RestaurantOut(**r.model_dump()) for r in found]
    else:
        items = [
            RestaurantOut(**n.item.model_dump(), distance=round(n.distance_km, 3))
            for n in filter_by_distance(found, origin, max_distance)
        ]
    return RestaurantListResponse(restaurants=items, count=len(items))


@app.get("/restaurants/search/nearby", response_model=RestaurantListResponse)
def nearby_restaurants(
    latitude: float = Query(..., ge=-90.0, le=90.0),
    longitude: float = Query(..., ge=-180.0, le=180.0),
    radius: float = Query(default=DEFAULT_MATCH_CONFIG.default_nearby_radius_km, ge=0.0),
) -> RestaurantListResponse:
    origin = GeoPoint(latitude=latitude, longitude=longitude)
    items = [
        RestaurantOut(**n.item.model_dump(), distance=round(n.distance_km, 3))
        for n in filter_by_distance(list_restaurants(), origin, radius)
    ]
    return RestaurantListResponse(restaurants=items, count=len(items), search_radius=radius)


@app.get("/restaurants/{restaurant_id}")
def restaurant_detail(restaurant_id: str) -> dict:
    restaurant = get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return {"restaurant": restaurant.model_dump(by_alias=True)}


@app.get("/restaurants/{restaurant_id}/menu")
def restaurant_menu(
    restaurant_id: str,
    category: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice", ge=0.0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0.0),
) -> dict:
    restaurant = get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")

    menu = list_menu(restaurant_id, category=category, min_price=min_price, max_price=max_price)
    return {
        "restaurant": {"id": restaurant.id, "name": restaurant.name},
        "menu": [d.model_dump(by_alias=True) for d in menu],
        "count": len(menu),
    }
