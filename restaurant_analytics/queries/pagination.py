from __future__ import annotations

import math
from typing import Any, Callable, Sequence, TypeVar

import pandas as pd

from .models import PaginationResult

T = TypeVar("T")


def page_bounds(page: int, limit: int) -> tuple[int, int]:
    """Return the ``[start, end)`` positions covered by ``page``."""
    start = (page - 1) * limit
    return start, start + limit


def count_pages(total_items: int, per_page: int) -> int:
    return math.ceil(total_items / per_page) if per_page > 0 else 0


def paginate(items: Sequence[T], page: int, limit: int) -> PaginationResult[T]:
    start, end = page_bounds(page, limit)
    return PaginationResult(
        items=list(items[start:end]),
        current_page=page,
        total_pages=count_pages(len(items), limit),
        total_items=len(items),
        per_page=limit,
    )


def paginate_frame(
    df: pd.DataFrame,
    page: int,
    limit: int,
    to_item: Callable[[dict[str, Any]], T],
) -> PaginationResult[T]:
    """Paginate a DataFrame, converting only the rows on the requested page."""
    start, end = page_bounds(page, limit)
    rows = df.iloc[start:end].to_dict(orient="records")
    return PaginationResult(
        items=[to_item(row) for row in rows],
        current_page=page,
        total_pages=count_pages(len(df), limit),
        total_items=len(df),
        per_page=limit,
    )
