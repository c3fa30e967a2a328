from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import DEFAULT_MATCH_CONFIG

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeoPoint(CamelModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class DishDescriptor(CamelModel):
    name: str = Field(..., min_length=1)
    ingredients: list[str] = Field(default_factory=list)
    description: str | None = None
    price: float | None = None
    restaurant_id: str | None = None
    id: str | None = None
    category: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("dish name must not be blank")
        return value


class AnalyzedDish(DishDescriptor):
    cuisine: str = "Unknown"
    estimated_calories: float = 0.0
    dietary_info: list[str] = Field(default_factory=list)
    confidence: float = 0.0


class ScoredMatch(DishDescriptor):
    similarity: int = Field(..., ge=0, le=100)


class Restaurant(CamelModel):
    id: str
    name: str
    location: GeoPoint
    cuisine_type: str | None = None
    rating: float | None = None
    address: str | None = None


@dataclass(frozen=True)
class ProximityAnnotated(Generic[T]):
    item: T
    distance_km: float


# ── HTTP request / response models ───────────────────────────────────────


class MatchRequest(CamelModel):
    target_dish: DishDescriptor
    user_location: GeoPoint
    max_distance: float = Field(default=DEFAULT_MATCH_CONFIG.default_max_distance_km, ge=0.0)
    min_similarity: int = Field(default=DEFAULT_MATCH_CONFIG.default_min_similarity, ge=0, le=100)
    max_price: float | None = None


class RestaurantSummary(CamelModel):
    id: str
    name: str
    address: str | None = None
    cuisine_type: str | None = None
    rating: float | None = None
    distance: float


class MatchedDish(ScoredMatch):
    restaurant: RestaurantSummary


class SearchParams(CamelModel):
    max_distance: float
    min_similarity: int
    max_price: float | None = None
    restaurants_searched: int


class MatchResponse(CamelModel):
    message: str
    matches: list[MatchedDish]
    search_params: SearchParams


class TextAnalysisRequest(CamelModel):
    description: str = Field(..., max_length=2000)


class AnalysisResponse(CamelModel):
    message: str
    dish: AnalyzedDish


class RestaurantOut(Restaurant):
    distance: float | None = None


class RestaurantListResponse(CamelModel):
    restaurants: list[RestaurantOut]
    count: int
    search_radius: float | None = None


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
