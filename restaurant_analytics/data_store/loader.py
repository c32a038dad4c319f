from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import LoadError
from .config import DEFAULT_DATA_STORE_CONFIG, DataStoreConfig

logger = logging.getLogger(__name__)

RESTAURANT_COLUMNS: list[str] = ["id", "name", "location", "cuisine"]
ORDER_COLUMNS: list[str] = ["restaurant_id", "order_time", "order_amount"]

_TEXT_COLUMNS = ["name", "location", "cuisine"]


def normalize_id(value: Any) -> str:
    """Return the canonical string form of a record identifier."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _read_records(path: Path) -> list[dict[str, Any]]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(f"Cannot read dataset {path.name}") from exc

    try:
        records = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LoadError(f"Dataset {path.name} is not valid JSON") from exc

    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise LoadError(f"Dataset {path.name} must be a JSON array of objects")
    return records


def _wall_clock(value: Any) -> pd.Timestamp:
    """Parse an order time, dropping any offset but keeping the local date and hour."""
    if not isinstance(value, str):
        return pd.NaT
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return pd.NaT
    if ts is pd.NaT:
        return pd.NaT
    return ts.tz_localize(None) if ts.tzinfo is not None else ts


def build_restaurant_frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame.from_records(records, columns=RESTAURANT_COLUMNS)
    df["id"] = df["id"].map(normalize_id)

    # Lowercase text fields for case-insensitive search and matching
    for column in _TEXT_COLUMNS:
        df[column] = df[column].fillna("").astype(str)
        df[f"{column}_lower"] = df[column].str.lower()

    return df.reset_index(drop=True)


def build_order_frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame.from_records(records, columns=ORDER_COLUMNS)
    df["restaurant_id"] = df["restaurant_id"].map(normalize_id)

    order_ts = pd.to_datetime(df["order_time"].map(_wall_clock))
    amounts = pd.to_numeric(df["order_amount"], errors="coerce")

    valid = order_ts.notna() & amounts.notna()
    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropped %d orders with an unparseable order_time or order_amount", dropped)

    df = df.loc[valid].copy()
    order_ts = order_ts.loc[valid]

    df["order_time"] = df["order_time"].astype(str)
    df["order_amount"] = amounts.loc[valid].astype(float)
    df["order_ts"] = order_ts
    df["order_day"] = order_ts.dt.normalize()
    df["order_date"] = order_ts.dt.strftime("%Y-%m-%d")
    df["order_hour"] = order_ts.dt.hour.astype(int)

    return df.reset_index(drop=True)


def load_records(
    config: DataStoreConfig = DEFAULT_DATA_STORE_CONFIG,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Read both datasets and return ``(restaurants, orders)`` DataFrames.

    Raises ``LoadError`` when either file is missing or malformed. Individual
    orders whose time or amount cannot be parsed are dropped with a warning.
    """
    restaurants = build_restaurant_frame(_read_records(config.restaurants_path))
    orders = build_order_frame(_read_records(config.orders_path))
    logger.info(
        "Loaded %d restaurants and %d orders from %s",
        len(restaurants),
        len(orders),
        config.data_dir,
    )
    return restaurants, orders
