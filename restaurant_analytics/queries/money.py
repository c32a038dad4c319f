from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    """Round half-up to cents using the shortest decimal form of ``value``."""
    return float(Decimal(repr(float(value))).quantize(_CENT, rounding=ROUND_HALF_UP))


def average_value(total: float, count: int) -> float:
    return round_currency(total / count) if count else 0.0
