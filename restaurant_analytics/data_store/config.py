from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_BUNDLED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class DataStoreConfig:
    """
    Where the datasets live and how long a loaded snapshot stays fresh.
    """

    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("ANALYTICS_DATA_DIR", str(_BUNDLED_DATA_DIR)))
    )
    restaurants_filename: str = "restaurants.json"
    orders_filename: str = "orders.json"
    ttl_seconds: float = field(
        default_factory=lambda: float(os.getenv("ANALYTICS_CACHE_TTL", "300"))
    )

    @property
    def restaurants_path(self) -> Path:
        return self.data_dir / self.restaurants_filename

    @property
    def orders_path(self) -> Path:
        return self.data_dir / self.orders_filename


DEFAULT_DATA_STORE_CONFIG = DataStoreConfig()
