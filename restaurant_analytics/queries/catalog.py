from __future__ import annotations

from operator import attrgetter
from typing import Any

import pandas as pd

from ..data_store.loader import RESTAURANT_COLUMNS, normalize_id
from ..data_store.store import Snapshot
from ..errors import RestaurantNotFound
from .filters import Predicate, apply_filters, contains_text, equals_text
from .models import FilterOptions, PaginationResult, Restaurant, RestaurantCriteria
from .pagination import paginate

SORTABLE_FIELDS = ("name", "location", "cuisine")
SEARCHABLE_FIELDS = ("name", "location", "cuisine")


def _to_restaurants(df: pd.DataFrame) -> list[Restaurant]:
    return [Restaurant(**row) for row in df[RESTAURANT_COLUMNS].to_dict(orient="records")]


def restaurant_predicates(criteria: RestaurantCriteria) -> dict[str, Predicate | None]:
    return {
        "search": contains_text(SEARCHABLE_FIELDS, criteria.search),
        "location": equals_text("location", criteria.location),
        "cuisine": equals_text("cuisine", criteria.cuisine),
    }


def search_restaurants(
    snapshot: Snapshot,
    criteria: RestaurantCriteria,
) -> PaginationResult[Restaurant]:
    """Filter, optionally sort, and paginate the restaurant catalog."""
    matched = apply_filters(snapshot.restaurants, restaurant_predicates(criteria))
    restaurants = _to_restaurants(matched)

    # sorted() is stable for reverse=True too, so ties keep catalog order
    if criteria.sort in SORTABLE_FIELDS:
        restaurants = sorted(
            restaurants,
            key=attrgetter(criteria.sort),
            reverse=criteria.order == "desc",
        )

    return paginate(restaurants, criteria.page, criteria.limit)


def distinct_values(snapshot: Snapshot, column: str) -> list[str]:
    """Unique non-empty values of ``column`` in first-seen order."""
    return [v for v in snapshot.restaurants[column].drop_duplicates().tolist() if v]


def distinct_locations(snapshot: Snapshot) -> list[str]:
    return distinct_values(snapshot, "location")


def distinct_cuisines(snapshot: Snapshot) -> list[str]:
    return distinct_values(snapshot, "cuisine")


def filter_options(snapshot: Snapshot) -> FilterOptions:
    return FilterOptions(
        locations=distinct_locations(snapshot),
        cuisines=distinct_cuisines(snapshot),
    )


def find_restaurant(snapshot: Snapshot, restaurant_id: Any) -> Restaurant | None:
    """Return the first restaurant with ``restaurant_id``, or ``None``."""
    df = snapshot.restaurants
    matches = df.loc[df["id"] == normalize_id(restaurant_id)]
    if matches.empty:
        return None
    return Restaurant(**matches.iloc[0][RESTAURANT_COLUMNS].to_dict())


def get_restaurant(snapshot: Snapshot, restaurant_id: Any) -> Restaurant:
    """Like ``find_restaurant`` but raises ``RestaurantNotFound``."""
    restaurant = find_restaurant(snapshot, restaurant_id)
    if restaurant is None:
        raise RestaurantNotFound(normalize_id(restaurant_id))
    return restaurant
