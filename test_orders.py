# file: test_orders.py

import re

import pytest


def test_create_order_requires_session(client):
    resp = client.post("/order", json={"address": "12 Ring Road", "cylinderType": "12kg", "payment": "cash"})
    assert resp.status_code == 401


def test_session_is_checked_before_body(client):
    assert client.post("/order", json={}).status_code == 401


@pytest.mark.parametrize("missing", ["address", "cylinderType", "payment"])
def test_create_order_requires_core_fields(client, login, missing):
    login("ama@example.com")
    body = {"address": "12 Ring Road", "cylinderType": "12kg", "payment": "cash"}
    body.pop(missing)
    resp = client.post("/order", json=body)
    assert resp.status_code == 400
    assert missing in resp.json()["error"]


def test_blank_required_field_is_rejected(client, login):
    login("ama@example.com")
    resp = client.post("/order", json={"address": " ", "cylinderType": "12kg", "payment": "cash"})
    assert resp.status_code == 400


def test_unknown_fields_are_rejected(client, login):
    login("ama@example.com")
    resp = client.post(
        "/order", json={"address": "12 Ring Road", "cylinderType": "12kg", "payment": "cash", "driver_email": "x@y.z"}
    )
    assert resp.status_code == 400


def test_location_needs_both_coordinates(client, login):
    login("ama@example.com")
    resp = client.post(
        "/order", json={"address": "12 Ring Road", "cylinderType": "12kg", "payment": "cash", "location": {"lat": 5.6}}
    )
    assert resp.status_code == 400


def test_create_order_defaults(client, login, place_order):
    login("ama@example.com")
    order = place_order()
    assert re.fullmatch(r"[0-9a-f]{8}", order["order_id"])
    assert order["email"] == "ama@example.com"
    assert order["status"] == "pending"
    assert order["payment_method"] == "cash"
    assert order["cylinder_type"] == "12kg"
    assert order["location_lat"] is None and order["location_lng"] is None
    assert order["driver_email"] is None
    assert order["failed_note"] is None


def test_create_order_with_all_fields(client, login, place_order):
    login("ama@example.com")
    order = place_order(
        customerName="Ama",
        location={"lat": 5.6037, "lng": -0.187},
        filled=True,
        uniqueCode="TRK-1",
        status="scheduled",
        date="2026-10-01T09:00:00Z",
        amountPaid=120.5,
        notes="gate code 44",
        serviceType="refill",
        timeSlot="morning",
        deliveryWindow="09:00-11:00",
    )
    assert order["customer_name"] == "Ama"
    assert order["location_lat"] == pytest.approx(5.6037)
    assert order["location_lng"] == pytest.approx(-0.187)
    assert order["filled"] is True
    assert order["unique_code"] == "TRK-1"
    assert order["status"] == "scheduled"
    assert order["amount_paid"] == pytest.approx(120.5)
    assert order["delivery_window"] == "09:00-11:00"


def test_order_owner_comes_from_session(client, login, place_order):
    login("ama@example.com")
    order = place_order(customerName="someone else")
    assert order["email"] == "ama@example.com"


def test_order_ids_are_unique(client, login, place_order):
    login("ama@example.com")
    ids = {place_order()["order_id"] for _ in range(5)}
    assert len(ids) == 5


def test_check_order_returns_latest_match_without_session(client, login, place_order):
    login("ama@example.com")
    place_order(uniqueCode="TRK-1", date="2026-09-01T09:00:00Z", notes="old")
    place_order(uniqueCode="TRK-1", date="2026-10-01T09:00:00Z", notes="new")
    place_order(uniqueCode="TRK-2", date="2026-11-01T09:00:00Z", notes="other")
    client.cookies.clear()

    resp = client.post("/order/check", json={"email": "ama@example.com", "uniqueCode": "TRK-1"})
    assert resp.status_code == 200
    assert resp.json()["order"]["notes"] == "new"


def test_check_order_not_found(client, login, place_order):
    login("ama@example.com")
    place_order(uniqueCode="TRK-1")
    resp = client.post("/order/check", json={"email": "kofi@example.com", "uniqueCode": "TRK-1"})
    assert resp.status_code == 404


def test_check_order_requires_both_fields(client):
    assert client.post("/order/check", json={"email": "ama@example.com"}).status_code == 400


def test_driver_orders_requires_driver(client, login):
    assert client.get("/driver/orders").status_code == 403
    login("ama@example.com")
    assert client.get("/driver/orders").status_code == 403


def test_driver_sees_only_own_orders_newest_first(client, login, place_order):
    login("ama@example.com")
    older = place_order(date="2026-09-01T09:00:00Z")
    newer = place_order(date="2026-10-01T09:00:00Z")
    foreign = place_order(date="2026-10-02T09:00:00Z")

    login("admin@example.com", role="admin")
    client.post("/assign-cluster", json={"driver_email": "d@x.com", "order_ids": [older["order_id"], newer["order_id"]]})
    client.post("/assign-cluster", json={"driver_email": "e@x.com", "order_ids": [foreign["order_id"]]})

    login("d@x.com", role="driver")
    resp = client.get("/driver/orders")
    assert resp.status_code == 200
    assert [o["order_id"] for o in resp.json()["orders"]] == [newer["order_id"], older["order_id"]]


def test_all_orders_for_admin_only(client, login, place_order):
    login("ama@example.com")
    first = place_order(date="2026-09-01T09:00:00Z")
    second = place_order(date="2026-10-01T09:00:00Z")

    login("d@x.com", role="driver")
    assert client.get("/orders").status_code == 403

    login("admin@example.com", role="admin")
    resp = client.get("/orders")
    assert resp.status_code == 200
    body = resp.json()
    assert [o["order_id"] for o in body["orders"]] == [second["order_id"], first["order_id"]]
    assert body["drivers"] == ["d@x.com"]


def _assign(client, login, driver, order_ids):
    login("admin@example.com", role="admin")
    resp = client.post("/assign-cluster", json={"driver_email": driver, "order_ids": order_ids})
    assert resp.status_code == 200


def test_batch_update_changes_own_orders(client, login, place_order, rows):
    login("ama@example.com")
    order = place_order()
    _assign(client, login, "d@x.com", [order["order_id"]])

    login("d@x.com", role="driver")
    resp = client.post(
        "/driver/update-orders",
        json={"updates": [{"orderId": order["order_id"], "status": "failed", "failedNote": "nobody home"}]},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    stored = rows("orders")[0]
    assert stored["status"] == "failed"
    assert stored["failed_note"] == "nobody home"


def test_batch_update_never_touches_another_drivers_order(client, login, place_order, rows):
    login("ama@example.com")
    order = place_order()
    _assign(client, login, "b@x.com", [order["order_id"]])

    login("a@x.com", role="driver")
    resp = client.post("/driver/update-orders", json={"updates": [{"orderId": order["order_id"], "status": "delivered"}]})
    assert resp.status_code == 200
    stored = rows("orders")[0]
    assert stored["status"] == "pending"
    assert stored["driver_email"] == "b@x.com"


def test_batch_update_skips_incomplete_items(client, login, place_order, rows):
    login("ama@example.com")
    first = place_order()
    second = place_order()
    _assign(client, login, "d@x.com", [first["order_id"], second["order_id"]])

    login("d@x.com", role="driver")
    resp = client.post(
        "/driver/update-orders",
        json={"updates": [
            {"orderId": first["order_id"]},
            {"status": "delivered"},
            {"orderId": second["order_id"], "status": "delivered"},
        ]},
    )
    assert resp.status_code == 200
    by_id = {o["order_id"]: o for o in rows("orders")}
    assert by_id[first["order_id"]]["status"] == "pending"
    assert by_id[second["order_id"]]["status"] == "delivered"


def test_batch_update_requires_updates(client, login):
    login("d@x.com", role="driver")
    assert client.post("/driver/update-orders", json={"updates": []}).status_code == 400
    assert client.post("/driver/update-orders", json={}).status_code == 400


def test_batch_update_requires_driver(client, login):
    login("admin@example.com", role="admin")
    resp = client.post("/driver/update-orders", json={"updates": [{"orderId": "ab12cd34", "status": "delivered"}]})
    assert resp.status_code == 403
