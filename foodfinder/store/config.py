from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class StoreConfig:
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("FOODFINDER_DATA_DIR", str(_DEFAULT_DATA_DIR)))
    )
    restaurants_filename: str = "restaurants.csv"
    dishes_filename: str = "dishes.csv"

    @property
    def restaurants_path(self) -> Path:
        return self.data_dir / self.restaurants_filename

    @property
    def dishes_path(self) -> Path:
        return self.data_dir / self.dishes_filename


DEFAULT_STORE_CONFIG = StoreConfig()
