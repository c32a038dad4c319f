from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for errors raised by the analytics core."""


class LoadError(AnalyticsError):
    """The backing dataset is missing or cannot be parsed."""


class NotFound(AnalyticsError):
    """A requested record does not exist in the current snapshot."""


class RestaurantNotFound(NotFound):
    def __init__(self, restaurant_id: str) -> None:
        super().__init__(f"Restaurant not found: {restaurant_id}")
        self.restaurant_id = restaurant_id


class InvalidParameter(AnalyticsError):
    """A query parameter could not be interpreted."""
