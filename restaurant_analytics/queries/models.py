from __future__ import annotations

import math
from datetime import date
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..data_store.loader import normalize_id
from ..errors import InvalidParameter

T = TypeVar("T")

DEFAULT_RESTAURANT_LIMIT = 10
DEFAULT_ORDER_LIMIT = 50
DEFAULT_TOP_LIMIT = 3


# ── Coercion helpers ────────────────────────────────────────────────────


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _to_int(value: Any) -> int | None:
    """Parse a permissive integer, returning ``None`` when it isn't one."""
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _to_float(value: Any) -> float | None:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _positive_int(value: Any, default: int) -> int:
    number = _to_int(value)
    return number if number is not None and number >= 1 else default


# ── Records ─────────────────────────────────────────────────────────────


class Restaurant(BaseModel):
    id: str
    name: str
    location: str
    cuisine: str


class Order(BaseModel):
    restaurant_id: str
    order_time: str
    order_amount: float


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    per_page: int


class PaginationResult(BaseModel, Generic[T]):
    items: list[T]
    current_page: int
    total_pages: int
    total_items: int
    per_page: int

    def meta(self) -> PaginationMeta:
        return PaginationMeta(
            current_page=self.current_page,
            total_pages=self.total_pages,
            total_items=self.total_items,
            per_page=self.per_page,
        )


class DailyTrend(BaseModel):
    date: str
    order_count: int
    total_revenue: float
    average_order_value: float
    peak_hour: int | None = Field(default=None, ge=0, le=23)
    peak_hour_orders: int = 0


class RankedRestaurant(BaseModel):
    restaurant_id: str
    total_revenue: float
    order_count: int
    average_order_value: float


class TopRestaurant(BaseModel):
    """A ranked revenue group joined with the restaurant it belongs to."""

    id: str
    name: str
    location: str
    cuisine: str
    restaurant_id: str
    total_revenue: float
    order_count: int
    average_order_value: float


# ── Criteria ────────────────────────────────────────────────────────────


class QueryCriteria(BaseModel):
    """Base for typed query criteria built from loosely-typed parameters."""

    @classmethod
    def from_params(cls, params: Mapping[str, Any]):
        try:
            return cls.model_validate(dict(params))
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            raise InvalidParameter(f"Invalid value for: {', '.join(fields)}") from exc


class DateWindowCriteria(QueryCriteria):
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_blank_date(cls, value: Any) -> Any:
        return _blank_to_none(value)


class RestaurantCriteria(QueryCriteria):
    search: str | None = None
    location: str | None = None
    cuisine: str | None = None
    sort: str | None = None
    order: str = "asc"
    page: int = 1
    limit: int = DEFAULT_RESTAURANT_LIMIT

    @field_validator("search", "location", "cuisine", "sort", mode="before")
    @classmethod
    def coerce_blank_text(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return None if value is None else str(value)

    @field_validator("order", mode="before")
    @classmethod
    def coerce_direction(cls, value: Any) -> str:
        return "desc" if isinstance(value, str) and value.strip().lower() == "desc" else "asc"

    @field_validator("page", mode="before")
    @classmethod
    def coerce_page(cls, value: Any) -> int:
        return _positive_int(value, 1)

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_RESTAURANT_LIMIT)


class OrderCriteria(DateWindowCriteria):
    restaurant_id: str | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    start_hour: int | None = None
    end_hour: int | None = None
    page: int = 1
    limit: int = DEFAULT_ORDER_LIMIT

    @field_validator("restaurant_id", mode="before")
    @classmethod
    def coerce_restaurant_id(cls, value: Any) -> str | None:
        return normalize_id(_blank_to_none(value)) or None

    @field_validator("min_amount", "max_amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> float | None:
        return _to_float(value)

    @field_validator("start_hour", "end_hour", mode="before")
    @classmethod
    def coerce_hour(cls, value: Any) -> int | None:
        return _to_int(value)

    @field_validator("page", mode="before")
    @classmethod
    def coerce_page(cls, value: Any) -> int:
        return _positive_int(value, 1)

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_ORDER_LIMIT)


class TrendCriteria(DateWindowCriteria):
    restaurant_id: str

    @field_validator("restaurant_id", mode="before")
    @classmethod
    def coerce_restaurant_id(cls, value: Any) -> str | None:
        return normalize_id(value) or None


class TopRevenueCriteria(DateWindowCriteria):
    limit: int = DEFAULT_TOP_LIMIT

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_TOP_LIMIT)


# ── Response envelopes ──────────────────────────────────────────────────


class DateRange(BaseModel):
    start_date: date | None = None
    end_date: date | None = None


class FilterOptions(BaseModel):
    locations: list[str] = Field(default_factory=list)
    cuisines: list[str] = Field(default_factory=list)


class RestaurantListResponse(BaseModel):
    data: list[Restaurant]
    pagination: PaginationMeta
    filters: FilterOptions


class OrderListResponse(BaseModel):
    data: list[Order]
    pagination: PaginationMeta


class TrendsResponse(BaseModel):
    restaurant: Restaurant
    trends: list[DailyTrend]
    date_range: DateRange


class TopRestaurantsResponse(BaseModel):
    data: list[TopRestaurant]
    date_range: DateRange
