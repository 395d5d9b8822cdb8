from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.domain.orders.transitions import PAYMENT_REQUIRED_REASON


def test_list_orders_paginates(client, users, auth_headers, make_order):
    base = datetime(2026, 3, 1, tzinfo=timezone.utc)
    for idx in range(20):
        make_order(created_at=base + timedelta(minutes=idx))

    resp = client.get("/admin/orders", params={"page": 3, "limit": 9}, headers=auth_headers["admin"])

    assert resp.status_code == 200
    payload = resp.json()
    assert len(payload["orders"]) == 2
    assert payload["pagination"] == {"total": 20, "page": 3, "limit": 9, "total_pages": 3}


def test_list_orders_defaults_to_nine_per_page(client, users, auth_headers, make_order):
    for _ in range(10):
        make_order()

    payload = client.get("/admin/orders", headers=auth_headers["admin"]).json()

    assert len(payload["orders"]) == 9
    assert payload["pagination"]["total_pages"] == 2
    assert payload["orders"][0]["total_display"] == "$25.00"


def test_search_orders_by_status(client, users, auth_headers, make_order):
    make_order("confirmed", "paid")
    make_order("pending", "pending")

    resp = client.get("/admin/orders/search", params={"status": "confirmed"}, headers=auth_headers["admin"])
    assert resp.status_code == 200
    assert [o["status"] for o in resp.json()["orders"]] == ["confirmed"]

    bad = client.get("/admin/orders/search", params={"status": "lost"}, headers=auth_headers["admin"])
    assert bad.status_code == 422


def test_patch_rejects_status_change_until_paid(client, users, auth_headers, make_order, read_order):
    order_id = make_order("pending", "pending")

    resp = client.patch(
        f"/admin/orders/{order_id}",
        json={"status": "confirmed"},
        headers=auth_headers["admin"],
    )

    assert resp.status_code == 422
    assert resp.json() == {"detail": PAYMENT_REQUIRED_REASON, "error": "validation_rejected"}
    stored = read_order(order_id)
    assert (stored.status, stored.payment_status) == ("pending", "pending")


def test_patch_applies_payment_then_status_and_refreshes(client, users, auth_headers, make_order, read_order):
    order_id = make_order("pending", "pending")
    make_order("confirmed", "paid")

    resp = client.patch(
        f"/admin/orders/{order_id}",
        json={"payment_status": "paid", "status": "confirmed", "view": {"status": "confirmed"}},
        headers=auth_headers["admin"],
    )

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["writes"] == [
        {"field": "payment_status", "value": "paid"},
        {"field": "status", "value": "confirmed"},
    ]
    assert (payload["status"], payload["payment_status"]) == ("confirmed", "paid")
    assert payload["listing"]["pagination"]["total"] == 2
    stored = read_order(order_id)
    assert (stored.status, stored.payment_status) == ("confirmed", "paid")


def test_patch_unknown_order_is_not_found(client, users, auth_headers):
    resp = client.patch(
        "/admin/orders/does-not-exist",
        json={"payment_status": "paid"},
        headers=auth_headers["admin"],
    )
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_single_field_endpoints(client, users, auth_headers, make_order):
    order_id = make_order("pending", "pending")

    blocked = client.put(
        f"/admin/orders/{order_id}/status", json={"status": "shipping"}, headers=auth_headers["admin"]
    )
    assert blocked.status_code == 422

    paid = client.put(
        f"/admin/orders/{order_id}/payment", json={"payment_status": "paid"}, headers=auth_headers["admin"]
    )
    assert paid.status_code == 200
    assert "listing" not in paid.json()

    shipped = client.put(
        f"/admin/orders/{order_id}/status", json={"status": "shipping"}, headers=auth_headers["admin"]
    )
    assert shipped.status_code == 200
    assert shipped.json()["status"] == "shipping"

    invalid = client.put(
        f"/admin/orders/{order_id}/payment", json={"payment_status": "refunded"}, headers=auth_headers["admin"]
    )
    assert invalid.status_code == 422


def test_order_detail_view(client, users, auth_headers, make_order):
    order_id = make_order(
        "pending",
        "paid",
        user_id=users["user"].user_id,
        items=[{"product_id": "prod-x", "size": "L", "quantity": 1, "unit_price": 4950}],
        payment_info={"payment_method": "credit_card", "card_last4": "4242", "name_on_card": "Sam"},
        shipping_address={"first_name": "Sam", "last_name": "Lee", "city": "Springfield"},
        shipping_estimate=599,
        tax_estimate=396,
    )

    resp = client.get(f"/admin/orders/{order_id}", headers=auth_headers["admin"])

    assert resp.status_code == 200
    detail = resp.json()
    assert detail["customer"]["email"] == "customer@example.com"
    assert detail["payment_info"] == {
        "payment_method": "credit card",
        "card_number": "**** **** **** 4242",
        "name_on_card": "Sam",
    }
    assert detail["order_summary"]["total"] == 4950 + 599 + 396
    assert detail["order_summary"]["total_display"] == "$59.45"
    assert detail["status_editable"] is True
    assert detail["items"][0]["product_name"] is None

    missing = client.get("/admin/orders/nope", headers=auth_headers["admin"])
    assert missing.status_code == 404


def test_order_options(client, users, auth_headers):
    resp = client.get("/admin/orders/options", headers=auth_headers["admin"])
    assert resp.json() == {
        "status_options": ["pending", "confirmed", "shipping", "delivered", "cancelled"],
        "payment_status_options": ["pending", "paid", "failed"],
    }


def _failing_count(*args, **kwargs):
    raise OperationalError("SELECT count(*) FROM orders", {}, Exception("database is locked"))


def test_storage_failure_maps_to_service_unavailable(client, users, auth_headers, make_order, monkeypatch):
    make_order()
    monkeypatch.setattr(Session, "scalar", _failing_count)

    resp = client.get("/admin/orders", headers=auth_headers["admin"])

    assert resp.status_code == 503
    assert resp.json() == {"detail": "failed to list orders", "error": "persistence_failure"}


def test_patch_refresh_failure_keeps_writes(client, users, auth_headers, make_order, read_order, monkeypatch):
    order_id = make_order("pending", "pending")
    monkeypatch.setattr(Session, "scalar", _failing_count)

    resp = client.patch(
        f"/admin/orders/{order_id}",
        json={"payment_status": "paid", "status": "confirmed"},
        headers=auth_headers["admin"],
    )

    assert resp.status_code == 503
    assert resp.json()["error"] == "persistence_failure"
    stored = read_order(order_id)
    assert (stored.status, stored.payment_status) == ("confirmed", "paid")
