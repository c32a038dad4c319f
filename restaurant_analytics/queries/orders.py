from __future__ import annotations

from ..data_store.loader import ORDER_COLUMNS
from ..data_store.store import Snapshot
from .filters import Predicate, apply_filters, at_least, at_most, date_window, equals
from .models import Order, OrderCriteria, PaginationResult
from .pagination import paginate_frame


def order_predicates(criteria: OrderCriteria) -> dict[str, Predicate | None]:
    return {
        "restaurant_id": equals("restaurant_id", criteria.restaurant_id),
        **date_window(criteria.start_date, criteria.end_date),
        "min_amount": at_least("order_amount", criteria.min_amount),
        "max_amount": at_most("order_amount", criteria.max_amount),
        "start_hour": at_least("order_hour", criteria.start_hour),
        "end_hour": at_most("order_hour", criteria.end_hour),
    }


def search_orders(snapshot: Snapshot, criteria: OrderCriteria) -> PaginationResult[Order]:
    """Filter and paginate orders; matches keep their snapshot order."""
    matched = apply_filters(snapshot.orders, order_predicates(criteria))
    return paginate_frame(
        matched[ORDER_COLUMNS],
        criteria.page,
        criteria.limit,
        lambda row: Order(**row),
    )
