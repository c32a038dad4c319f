from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Mapping, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

Predicate = Callable[[pd.DataFrame], pd.Series]


def apply_filters(
    df: pd.DataFrame,
    predicates: Mapping[str, Predicate | None],
) -> pd.DataFrame:
    """
    Keep the rows of ``df`` that satisfy every active predicate.

    Each predicate maps the frame to a boolean mask and masks are AND-ed, so
    the order in which predicates are listed never changes the result.
    ``None`` entries are inactive and match everything. Row order is preserved.
    """
    mask = pd.Series(True, index=df.index)
    active = [name for name, predicate in predicates.items() if predicate is not None]
    for name in active:
        mask &= predicates[name](df).astype(bool)
    if active:
        logger.debug("Applied filters %s: %d of %d rows match", active, int(mask.sum()), len(df))
    return df.loc[mask]


# ── Predicate builders ──────────────────────────────────────────────────
# Each builder returns None for an absent or empty value so callers can pass
# criteria fields straight through.


def contains_text(columns: Sequence[str], term: str | None) -> Predicate | None:
    """Case-insensitive substring match against any of ``columns``."""
    if not term:
        return None
    needle = term.lower()

    def predicate(df: pd.DataFrame) -> pd.Series:
        mask = pd.Series(False, index=df.index)
        for column in columns:
            mask |= df[f"{column}_lower"].str.contains(needle, regex=False, na=False)
        return mask

    return predicate


def equals_text(column: str, value: str | None) -> Predicate | None:
    """Case-insensitive exact match on a text column."""
    if not value:
        return None
    target = value.lower()
    return lambda df: df[f"{column}_lower"] == target


def equals(column: str, value: Any) -> Predicate | None:
    if value is None or value == "":
        return None
    return lambda df: df[column] == value


def at_least(column: str, bound: Any) -> Predicate | None:
    if bound is None:
        return None
    return lambda df: df[column] >= bound


def at_most(column: str, bound: Any) -> Predicate | None:
    if bound is None:
        return None
    return lambda df: df[column] <= bound


def date_window(
    start_date: date | None,
    end_date: date | None,
) -> dict[str, Predicate | None]:
    """Inclusive bounds on the calendar day of ``order_time``."""
    return {
        "start_date": at_least("order_day", pd.Timestamp(start_date)) if start_date else None,
        "end_date": at_most("order_day", pd.Timestamp(end_date)) if end_date else None,
    }
