from __future__ import annotations

import pandas as pd

from ..data_store.store import Snapshot
from .filters import apply_filters, date_window, equals
from .models import DailyTrend, TrendCriteria
from .money import average_value, round_currency


def _peak_hours(hourly: pd.Series) -> dict[str, tuple[int, int]]:
    """
    Map each date to ``(hour, order_count)`` of its busiest hour.

    Only a strictly greater count replaces the current peak, so ties go to
    the hour slot that was encountered first.
    """
    peaks: dict[str, tuple[int, int]] = {}
    for (day, hour), count in hourly.items():
        best = peaks.get(day)
        if best is None or count > best[1]:
            peaks[day] = (int(hour), int(count))
    return peaks


def order_trends(snapshot: Snapshot, criteria: TrendCriteria) -> list[DailyTrend]:
    """
    Per-day order statistics for one restaurant.

    Days are emitted in the order they first appear in the snapshot, not
    sorted by date.
    """
    matched = apply_filters(
        snapshot.orders,
        {
            "restaurant_id": equals("restaurant_id", criteria.restaurant_id),
            **date_window(criteria.start_date, criteria.end_date),
        },
    )
    if matched.empty:
        return []

    # sort=False keeps groups in first-seen order
    daily = matched.groupby("order_date", sort=False).agg(
        order_count=("order_amount", "count"),
        total_revenue=("order_amount", "sum"),
    )
    hourly = matched.groupby(["order_date", "order_hour"], sort=False).size()
    peaks = _peak_hours(hourly)

    trends: list[DailyTrend] = []
    for row in daily.itertuples():
        order_count = int(row.order_count)
        total_revenue = float(row.total_revenue)
        peak_hour, peak_hour_orders = peaks.get(row.Index, (None, 0))
        trends.append(DailyTrend(
            date=row.Index,
            order_count=order_count,
            total_revenue=round_currency(total_revenue),
            average_order_value=average_value(total_revenue, order_count),
            peak_hour=peak_hour,
            peak_hour_orders=peak_hour_orders,
        ))
    return trends
