from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import DEFAULT_API_CONFIG
from .data_store.store import RecordStore, Snapshot, get_store
from .errors import InvalidParameter, LoadError, NotFound
from .queries.catalog import filter_options, get_restaurant, search_restaurants
from .queries.models import (
    DateRange,
    FilterOptions,
    OrderCriteria,
    OrderListResponse,
    Restaurant,
    RestaurantCriteria,
    RestaurantListResponse,
    TopRestaurantsResponse,
    TopRevenueCriteria,
    TrendCriteria,
    TrendsResponse,
)
from .queries.orders import search_orders
from .queries.ranking import top_restaurants
from .queries.trends import order_trends

logger = logging.getLogger(__name__)

app = FastAPI(title=DEFAULT_API_CONFIG.title, version=DEFAULT_API_CONFIG.version)
app.add_middleware(
    CORSMiddleware,
    allow_origins=DEFAULT_API_CONFIG.cors_origins,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def current_snapshot(store: RecordStore = Depends(get_store)) -> Snapshot:
    """One snapshot per request, so every step of a query sees the same data."""
    return store.snapshot()


# ── Error mapping ────────────────────────────────────────────────────────


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidParameter)
async def invalid_parameter_handler(request: Request, exc: InvalidParameter) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(LoadError)
async def load_error_handler(request: Request, exc: LoadError) -> JSONResponse:
    logger.error("Dataset load failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Dataset unavailable"})


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error for %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Restaurant Analytics API", "status": "running"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata", response_model=FilterOptions)
def metadata(snapshot: Snapshot = Depends(current_snapshot)) -> FilterOptions:
    return filter_options(snapshot)


@app.get("/restaurants", response_model=RestaurantListResponse)
def list_restaurants(
    request: Request,
    snapshot: Snapshot = Depends(current_snapshot),
) -> RestaurantListResponse:
    criteria = RestaurantCriteria.from_params(request.query_params)
    result = search_restaurants(snapshot, criteria)
    return RestaurantListResponse(
        data=result.items,
        pagination=result.meta(),
        filters=filter_options(snapshot),
    )


@app.get("/restaurants/{restaurant_id}", response_model=Restaurant)
def restaurant_detail(
    restaurant_id: str,
    snapshot: Snapshot = Depends(current_snapshot),
) -> Restaurant:
    return get_restaurant(snapshot, restaurant_id)


@app.get("/restaurants/{restaurant_id}/trends", response_model=TrendsResponse)
def restaurant_trends(
    restaurant_id: str,
    request: Request,
    snapshot: Snapshot = Depends(current_snapshot),
) -> TrendsResponse:
    criteria = TrendCriteria.from_params({**request.query_params, "restaurant_id": restaurant_id})
    restaurant = get_restaurant(snapshot, criteria.restaurant_id)
    return TrendsResponse(
        restaurant=restaurant,
        trends=order_trends(snapshot, criteria),
        date_range=DateRange(start_date=criteria.start_date, end_date=criteria.end_date),
    )


@app.get("/top-restaurants", response_model=TopRestaurantsResponse)
def top_by_revenue(
    request: Request,
    snapshot: Snapshot = Depends(current_snapshot),
) -> TopRestaurantsResponse:
    criteria = TopRevenueCriteria.from_params(request.query_params)
    return TopRestaurantsResponse(
        data=top_restaurants(snapshot, criteria),
        date_range=DateRange(start_date=criteria.start_date, end_date=criteria.end_date),
    )


@app.get("/orders", response_model=OrderListResponse)
def list_orders(
    request: Request,
    snapshot: Snapshot = Depends(current_snapshot),
) -> OrderListResponse:
    criteria = OrderCriteria.from_params(request.query_params)
    result = search_orders(snapshot, criteria)
    return OrderListResponse(data=result.items, pagination=result.meta())


@app.get("/store/stats")
def store_stats(store: RecordStore = Depends(get_store)) -> dict:
    return store.stats()
