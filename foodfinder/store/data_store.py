from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from ..matching.models import DishDescriptor, GeoPoint, Restaurant
from .config import DEFAULT_STORE_CONFIG, StoreConfig

logger = logging.getLogger(__name__)

INGREDIENT_SEPARATOR = "|"

_RESTAURANT_COLUMNS = ["id", "name", "latitude", "longitude"]
_DISH_COLUMNS = ["id", "restaurant_id", "name"]

_config: StoreConfig = DEFAULT_STORE_CONFIG
_restaurants: pd.DataFrame | None = None
_dishes: pd.DataFrame | None = None


class StoreUnavailable(Exception):
    """The restaurant/dish dataset could not be read."""


def _read_csv(path: Path, required: list[str]) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, dtype={"id": str, "restaurant_id": str})
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise StoreUnavailable(f"Could not read {path.name}: {exc}") from exc

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise StoreUnavailable(f"{path.name} is missing columns: {', '.join(missing)}")
    return df


def _load_restaurants() -> pd.DataFrame:
    df = _read_csv(_config.restaurants_path, _RESTAURANT_COLUMNS)

    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")
    valid = df["latitude"].between(-90, 90) & df["longitude"].between(-180, 180)
    if not valid.all():
        logger.warning("Skipping %d restaurants with invalid coordinates", int((~valid).sum()))
    df = df.loc[valid].copy()

    for col in ("cuisine_type", "address", "rating"):
        if col not in df.columns:
            df[col] = None
    df["rating"] = pd.to_numeric(df["rating"], errors="coerce")
    df["cuisine_lower"] = df["cuisine_type"].fillna("").astype(str).str.strip().str.lower()

    return df.sort_values("name", kind="stable")


def _load_dishes() -> pd.DataFrame:
    df = _read_csv(_config.dishes_path, _DISH_COLUMNS)

    df = df.loc[df["name"].fillna("").astype(str).str.strip() != ""].copy()

    for col in ("ingredients", "description", "price", "category"):
        if col not in df.columns:
            df[col] = None
    df["price"] = pd.to_numeric(df["price"], errors="coerce")

    # Ingredients are stored pipe-separated in a single column
    df["ingredients_list"] = (
        df["ingredients"]
        .fillna("")
        .astype(str)
        .apply(lambda s: [i.strip() for i in s.split(INGREDIENT_SEPARATOR) if i.strip()])
    )
    df["category_lower"] = df["category"].fillna("").astype(str).str.strip().str.lower()

    return df


def _restaurants_df() -> pd.DataFrame:
    global _restaurants
    if _restaurants is None:
        _restaurants = _load_restaurants()
    return _restaurants


def _dishes_df() -> pd.DataFrame:
    global _dishes
    if _dishes is None:
        _dishes = _load_dishes()
    return _dishes


def reset_store(config: StoreConfig | None = None) -> None:
    """Forget the loaded datasets; the next lookup reads from ``config``."""
    global _config, _restaurants, _dishes
    _config = config or DEFAULT_STORE_CONFIG
    _restaurants = None
    _dishes = None


def _optional(value: Any) -> Any:
    return None if pd.isna(value) else value


def _to_restaurant(row: pd.Series) -> Restaurant:
    rating = _optional(row["rating"])
    address = _optional(row["address"])
    cuisine = _optional(row["cuisine_type"])
    return Restaurant(
        id=str(row["id"]),
        name=str(row["name"]),
        location=GeoPoint(latitude=float(row["latitude"]), longitude=float(row["longitude"])),
        cuisine_type=str(cuisine) if cuisine is not None else None,
        rating=float(rating) if rating is not None else None,
        address=str(address) if address is not None else None,
    )


def _to_dish(row: pd.Series) -> DishDescriptor:
    price = _optional(row["price"])
    description = _optional(row["description"])
    category = _optional(row["category"])
    return DishDescriptor(
        id=str(row["id"]),
        restaurant_id=str(row["restaurant_id"]),
        name=str(row["name"]),
        ingredients=list(row["ingredients_list"]),
        description=str(description) if description is not None else None,
        price=float(price) if price is not None else None,
        category=str(category) if category is not None else None,
    )


# ── Restaurants ──────────────────────────────────────────────────────────


def list_restaurants(cuisine_type: str | None = None) -> list[Restaurant]:
    """All restaurants ordered by name, optionally of one cuisine."""
    df = _restaurants_df()
    if cuisine_type:
        df = df.loc[df["cuisine_lower"] == cuisine_type.strip().lower()]
    return [_to_restaurant(row) for _, row in df.iterrows()]


def get_restaurant(restaurant_id: str) -> Restaurant | None:
    df = _restaurants_df()
    rows = df.loc[df["id"] == str(restaurant_id)]
    if rows.empty:
        return None
    return _to_restaurant(rows.iloc[0])


# ── Dishes ───────────────────────────────────────────────────────────────


def list_dishes_by_restaurant(restaurant_ids: Iterable[str]) -> list[DishDescriptor]:
    """Dishes served by any of ``restaurant_ids``, in dataset order."""
    wanted = {str(rid) for rid in restaurant_ids}
    if not wanted:
        return []
    df = _dishes_df()
    return [_to_dish(row) for _, row in df.loc[df["restaurant_id"].isin(wanted)].iterrows()]


def get_dish(dish_id: str) -> DishDescriptor | None:
    df = _dishes_df()
    rows = df.loc[df["id"] == str(dish_id)]
    if rows.empty:
        return None
    return _to_dish(rows.iloc[0])


def list_menu(
    restaurant_id: str,
    category: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
) -> list[DishDescriptor]:
    """One restaurant's dishes ordered by name, with optional category and price bounds."""
    df = _dishes_df()
    mask = df["restaurant_id"] == str(restaurant_id)

    if category:
        mask = mask & (df["category_lower"] == category.strip().lower())
    if min_price is not None:
        mask = mask & (df["price"] >= min_price)
    if max_price is not None:
        mask = mask & (df["price"] <= max_price)

    menu = df.loc[mask].sort_values("name", kind="stable")
    return [_to_dish(row) for _, row in menu.iterrows()]
