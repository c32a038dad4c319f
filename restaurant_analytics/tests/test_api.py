from __future__ import annotations

from fastapi.testclient import TestClient

from restaurant_analytics.app import app
from restaurant_analytics.data_store.store import RecordStore, get_store
from restaurant_analytics.errors import LoadError


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Restaurant Analytics API", "status": "running"}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ── Restaurants ──────────────────────────────────────────────────────────


def test_list_restaurants_envelope(client):
    resp = client.get("/restaurants")
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["data"]) == 5
    assert body["pagination"] == {
        "current_page": 1,
        "total_pages": 1,
        "total_items": 5,
        "per_page": 10,
    }
    assert body["filters"]["cuisines"] == ["Indian", "Chinese", "Italian"]


def test_list_restaurants_with_filters_and_sort(client):
    resp = client.get("/restaurants", params={"location": "MUMBAI", "sort": "name", "order": "desc"})
    body = resp.json()
    assert [r["name"] for r in body["data"]] == ["Wok This Way", "Noodle Bar"]
    assert body["pagination"]["total_items"] == 2
    # filter choices always describe the full dataset
    assert len(body["filters"]["locations"]) == 4


def test_list_restaurants_coerces_bad_paging(client):
    resp = client.get("/restaurants", params={"page": "zero", "limit": "-4"})
    assert resp.status_code == 200
    assert resp.json()["pagination"]["current_page"] == 1
    assert resp.json()["pagination"]["per_page"] == 10


def test_restaurant_detail(client):
    resp = client.get("/restaurants/3")
    assert resp.status_code == 200
    assert resp.json() == {
        "id": "3",
        "name": "Bella Napoli",
        "location": "bangalore",
        "cuisine": "Italian",
    }


def test_restaurant_detail_not_found(client):
    resp = client.get("/restaurants/999")
    assert resp.status_code == 404
    assert "999" in resp.json()["detail"]


def test_metadata(client):
    resp = client.get("/metadata")
    assert resp.status_code == 200
    assert resp.json()["locations"] == ["Bangalore", "Mumbai", "bangalore", "Delhi"]


# ── Trends ───────────────────────────────────────────────────────────────


def test_trends(client):
    resp = client.get(
        "/restaurants/1/trends",
        params={"start_date": "2025-06-22", "end_date": "2025-06-22"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["restaurant"]["name"] == "Spice Route"
    assert body["date_range"] == {"start_date": "2025-06-22", "end_date": "2025-06-22"}
    assert body["trends"] == [{
        "date": "2025-06-22",
        "order_count": 3,
        "total_revenue": 350.0,
        "average_order_value": 116.67,
        "peak_hour": 10,
        "peak_hour_orders": 2,
    }]


def test_trends_without_window(client):
    body = client.get("/restaurants/1/trends").json()
    assert body["date_range"] == {"start_date": None, "end_date": None}
    assert len(body["trends"]) == 1


def test_trends_unknown_restaurant(client):
    assert client.get("/restaurants/42/trends").status_code == 404


def test_trends_blank_restaurant_id_is_bad_request(client):
    assert client.get("/restaurants/%20/trends").status_code == 400


def test_trends_bad_date_is_bad_request(client):
    resp = client.get("/restaurants/1/trends", params={"start_date": "yesterday"})
    assert resp.status_code == 400


# ── Top restaurants ──────────────────────────────────────────────────────


def test_top_restaurants(client):
    resp = client.get("/top-restaurants", params={"limit": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["data"] == [
        {
            "id": "2",
            "name": "Noodle Bar",
            "location": "Mumbai",
            "cuisine": "Chinese",
            "restaurant_id": "2",
            "total_revenue": 500.0,
            "order_count": 1,
            "average_order_value": 500.0,
        },
        {
            "id": "1",
            "name": "Spice Route",
            "location": "Bangalore",
            "cuisine": "Indian",
            "restaurant_id": "1",
            "total_revenue": 350.0,
            "order_count": 3,
            "average_order_value": 116.67,
        },
    ]
    assert body["date_range"] == {"start_date": None, "end_date": None}


def test_top_restaurants_outside_window(client):
    resp = client.get("/top-restaurants", params={"start_date": "2026-01-01"})
    assert resp.status_code == 200
    assert resp.json()["data"] == []


# ── Orders ───────────────────────────────────────────────────────────────


def test_list_orders(client):
    resp = client.get("/orders", params={"restaurant_id": "1", "min_amount": "75"})
    assert resp.status_code == 200
    body = resp.json()
    assert [o["order_amount"] for o in body["data"]] == [100.0, 200.0]
    assert body["pagination"]["per_page"] == 50
    assert body["pagination"]["total_items"] == 2


def test_list_orders_hour_window(client):
    body = client.get("/orders", params={"start_hour": "9", "end_hour": "10"}).json()
    assert [o["order_time"] for o in body["data"]] == [
        "2025-06-22T10:00",
        "2025-06-22T10:30",
        "2025-06-22T09:00",
    ]


# ── Store and errors ─────────────────────────────────────────────────────


def test_store_stats(client):
    client.get("/restaurants")
    body = client.get("/store/stats").json()
    assert body["reloads"] == 1
    assert body["order_count"] == 4


def test_store_reloads_after_ttl(client, store, clock, data_dir):
    client.get("/restaurants")
    (data_dir / "restaurants.json").write_text(
        '[{"id": 1, "name": "Only One", "location": "X", "cuisine": "Y"}]',
        encoding="utf-8",
    )
    assert client.get("/restaurants").json()["pagination"]["total_items"] == 5
    clock.advance(300)
    assert client.get("/restaurants").json()["pagination"]["total_items"] == 1


def _failing_loader():
    raise LoadError("orders.json is corrupt")


def test_load_error_is_generic_500():
    app.dependency_overrides[get_store] = lambda: RecordStore(_failing_loader)
    try:
        resp = TestClient(app).get("/restaurants")
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Dataset unavailable"}


def _broken_loader():
    raise RuntimeError("boom")


def test_unexpected_error_hides_internals():
    app.dependency_overrides[get_store] = lambda: RecordStore(_broken_loader)
    try:
        resp = TestClient(app, raise_server_exceptions=False).get("/orders")
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
    assert "boom" not in resp.text
