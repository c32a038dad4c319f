from __future__ import annotations

from ..data_store.store import Snapshot
from .catalog import find_restaurant
from .filters import apply_filters, date_window
from .models import RankedRestaurant, TopRestaurant, TopRevenueCriteria
from .money import average_value, round_currency


def _id_sort_key(restaurant_id: str) -> tuple[int, int, str]:
    """Numeric ids sort numerically and ahead of non-numeric ids."""
    if restaurant_id.isdecimal():
        return (0, int(restaurant_id), "")
    return (1, 0, restaurant_id)


def rank_by_revenue(snapshot: Snapshot, criteria: TopRevenueCriteria) -> list[RankedRestaurant]:
    """
    Group orders in the date window by restaurant and rank by total revenue.

    Equal revenue is ordered by restaurant id ascending. Orphan restaurant
    ids are ranked like any other; the join step drops them.
    """
    matched = apply_filters(
        snapshot.orders,
        date_window(criteria.start_date, criteria.end_date),
    )
    if matched.empty:
        return []

    grouped = matched.groupby("restaurant_id", sort=False).agg(
        total_revenue=("order_amount", "sum"),
        order_count=("order_amount", "count"),
    )

    ranked = [
        RankedRestaurant(
            restaurant_id=str(row.Index),
            total_revenue=round_currency(float(row.total_revenue)),
            order_count=int(row.order_count),
            average_order_value=average_value(float(row.total_revenue), int(row.order_count)),
        )
        for row in grouped.itertuples()
    ]
    ranked.sort(key=lambda r: (-r.total_revenue, _id_sort_key(r.restaurant_id)))
    return ranked[: criteria.limit]


def join_with_restaurants(
    snapshot: Snapshot,
    ranked: list[RankedRestaurant],
) -> list[TopRestaurant]:
    """Attach restaurant details to each ranked group, dropping unknown ids."""
    joined: list[TopRestaurant] = []
    for group in ranked:
        restaurant = find_restaurant(snapshot, group.restaurant_id)
        if restaurant is None:
            continue
        joined.append(TopRestaurant(**restaurant.model_dump(), **group.model_dump()))
    return joined


def top_restaurants(snapshot: Snapshot, criteria: TopRevenueCriteria) -> list[TopRestaurant]:
    return join_with_restaurants(snapshot, rank_by_revenue(snapshot, criteria))
