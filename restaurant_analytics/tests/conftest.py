from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from restaurant_analytics.app import app
from restaurant_analytics.data_store.config import DataStoreConfig
from restaurant_analytics.data_store.loader import (
    build_order_frame,
    build_restaurant_frame,
    load_records,
)
from restaurant_analytics.data_store.store import RecordStore, Snapshot, get_store


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


RESTAURANTS = [
    {"id": 1, "name": "Spice Route", "location": "Bangalore", "cuisine": "Indian"},
    {"id": 2, "name": "Noodle Bar", "location": "Mumbai", "cuisine": "Chinese"},
    {"id": 3, "name": "Bella Napoli", "location": "bangalore", "cuisine": "Italian"},
    {"id": 4, "name": "Masala House", "location": "Delhi", "cuisine": "Indian"},
    {"id": 5, "name": "Wok This Way", "location": "Mumbai", "cuisine": "Chinese"},
]

ORDERS = [
    {"restaurant_id": 1, "order_time": "2025-06-22T10:00", "order_amount": 100},
    {"restaurant_id": 1, "order_time": "2025-06-22T10:30", "order_amount": 50},
    {"restaurant_id": 1, "order_time": "2025-06-22T14:00", "order_amount": 200},
    {"restaurant_id": 2, "order_time": "2025-06-22T09:00", "order_amount": 500},
]


def make_snapshot(restaurants: list[dict], orders: list[dict]) -> Snapshot:
    return Snapshot(
        restaurants=build_restaurant_frame(restaurants),
        orders=build_order_frame(orders),
        loaded_at=0.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def snapshot() -> Snapshot:
    return make_snapshot(RESTAURANTS, ORDERS)


@pytest.fixture
def snapshot_factory():
    return make_snapshot


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    (tmp_path / "restaurants.json").write_text(json.dumps(RESTAURANTS), encoding="utf-8")
    (tmp_path / "orders.json").write_text(json.dumps(ORDERS), encoding="utf-8")
    return tmp_path


@pytest.fixture
def store(data_dir: Path, clock: FakeClock) -> RecordStore:
    config = DataStoreConfig(data_dir=data_dir)
    return RecordStore(lambda: load_records(config), ttl_seconds=300, clock=clock)


@pytest.fixture
def client(store: RecordStore):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
