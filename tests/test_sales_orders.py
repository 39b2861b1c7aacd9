import datetime as dt
from decimal import Decimal

WIDE_RANGE = {"start_date": "2000-01-01T00:00:00", "end_date": "2100-01-01T00:00:00"}


def _order(client, headers, product_id, quantity, unit_price="15.00", customer_id=7):
    return client.post(
        "/api/sales-orders",
        json={
            "customer_id": customer_id,
            "items": [{"product_id": product_id, "quantity": quantity, "unit_price": unit_price}],
        },
        headers=headers,
    )


def test_create_draws_stock_across_locations(client, user_headers, catalog, add_stock, stock_qty):
    first = add_stock(catalog.loc_a, 4)
    second = add_stock(catalog.loc_b, 10)

    resp = _order(client, user_headers, catalog.product["id"], 6)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["status"] == "open"
    assert Decimal(body["total_amount"]) == Decimal("90.00")
    assert stock_qty(first["id"]) == 0
    assert stock_qty(second["id"]) == 8


def test_insufficient_stock_rejected(client, user_headers, catalog, add_stock, stock_qty):
    stock = add_stock(catalog.loc_a, 2)
    resp = _order(client, user_headers, catalog.product["id"], 3)
    assert resp.status_code == 400
    assert resp.json()["message"] == (
        "Insufficient stock for items: Wireless Mouse (requested: 3, available: 2)"
    )
    assert stock_qty(stock["id"]) == 2
    listed = client.get("/api/sales-orders", headers=user_headers).json()
    assert listed["pagination"]["total"] == 0


def test_duplicate_products_rejected(client, user_headers, catalog):
    item = {"product_id": catalog.product["id"], "quantity": 1, "unit_price": "1.00"}
    resp = client.post("/api/sales-orders", json={"customer_id": 1, "items": [item, item]}, headers=user_headers)
    assert resp.status_code == 400


def test_cancel_restores_stock(client, admin_headers, catalog, add_stock, stock_qty):
    first = add_stock(catalog.loc_a, 4)
    second = add_stock(catalog.loc_b, 10)
    order = _order(client, admin_headers, catalog.product["id"], 6).json()

    resp = client.post(f"/api/sales-orders/{order['id']}/cancel", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "cancelled"
    assert stock_qty(first["id"]) == 4
    assert stock_qty(second["id"]) == 10

    history = client.get(f"/api/stock/{first['id']}/movements", headers=admin_headers).json()
    assert history["data"][0]["reason"] == f"Sales Order #{order['id']} cancelled"

    again = client.post(f"/api/sales-orders/{order['id']}/cancel", headers=admin_headers)
    assert again.status_code == 400
    assert again.json()["message"] == "Sales order is already cancelled"


def test_multi_product_order_in_any_item_order(client, admin_headers, catalog, add_stock, stock_qty):
    cable = client.post(
        "/api/products",
        json={
            "name": "USB-C Cable",
            "sku": "CABLE-001",
            "barcode": "5012345000035",
            "category_id": catalog.category["id"],
            "supplier_id": catalog.supplier["id"],
            "warehouse_id": catalog.warehouse["id"],
            "unit_price": "2.00",
            "price": "8.00",
        },
        headers=admin_headers,
    ).json()
    mouse_stock = add_stock(catalog.loc_a, 5)
    cable_stock = add_stock(catalog.loc_a, 5, product=cable)

    resp = client.post(
        "/api/sales-orders",
        json={
            "customer_id": 3,
            "items": [
                {"product_id": cable["id"], "quantity": 2, "unit_price": "8.00"},
                {"product_id": catalog.product["id"], "quantity": 3, "unit_price": "15.00"},
            ],
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    assert stock_qty(cable_stock["id"]) == 3
    assert stock_qty(mouse_stock["id"]) == 2

    client.post(f"/api/sales-orders/{resp.json()['id']}/cancel", headers=admin_headers)
    assert stock_qty(cable_stock["id"]) == 5
    assert stock_qty(mouse_stock["id"]) == 5


def test_cancel_via_status_update(client, admin_headers, catalog, add_stock, stock_qty):
    stock = add_stock(catalog.loc_a, 5)
    order = _order(client, admin_headers, catalog.product["id"], 5).json()
    resp = client.patch(f"/api/sales-orders/{order['id']}", json={"status": "cancelled"}, headers=admin_headers)
    assert resp.status_code == 200
    assert stock_qty(stock["id"]) == 5


def test_completed_order_is_final(client, admin_headers, catalog, add_stock, stock_qty):
    stock = add_stock(catalog.loc_a, 5)
    order = _order(client, admin_headers, catalog.product["id"], 2).json()
    done = client.patch(f"/api/sales-orders/{order['id']}", json={"status": "completed"}, headers=admin_headers)
    assert done.status_code == 200
    assert done.json()["status"] == "completed"

    cancel = client.post(f"/api/sales-orders/{order['id']}/cancel", headers=admin_headers)
    assert cancel.status_code == 400
    assert cancel.json()["message"] == "Cannot cancel a completed sales order"
    assert stock_qty(stock["id"]) == 3


def test_cancel_requires_manager(client, admin_headers, user_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 5)
    order = _order(client, user_headers, catalog.product["id"], 1).json()
    resp = client.post(f"/api/sales-orders/{order['id']}/cancel", headers=user_headers)
    assert resp.status_code == 403


def test_list_filters(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 10)
    _order(client, admin_headers, catalog.product["id"], 1, customer_id=1)
    _order(client, admin_headers, catalog.product["id"], 1, customer_id=2)

    by_customer = client.get("/api/sales-orders", params={"customer_id": 2}, headers=admin_headers).json()
    assert by_customer["pagination"]["total"] == 1
    assert by_customer["data"][0]["customer_id"] == 2

    in_range = client.get("/api/sales-orders", params=WIDE_RANGE, headers=admin_headers).json()
    assert in_range["pagination"]["total"] == 2


def test_stats_ignore_cancelled_revenue(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 10)
    _order(client, admin_headers, catalog.product["id"], 2, unit_price="10.00")
    _order(client, admin_headers, catalog.product["id"], 1, unit_price="20.00")
    cancelled = _order(client, admin_headers, catalog.product["id"], 3, unit_price="10.00").json()
    client.post(f"/api/sales-orders/{cancelled['id']}/cancel", headers=admin_headers)

    stats = client.get("/api/sales-orders/stats", params=WIDE_RANGE, headers=admin_headers).json()
    assert stats["order_count"] == 3
    assert stats["orders_by_status"] == {"open": 2, "cancelled": 1}
    assert Decimal(stats["total_revenue"]) == Decimal("40.00")
    assert Decimal(stats["average_order_value"]) == Decimal("20.00")


def test_stats_require_valid_range(client, admin_headers):
    resp = client.get(
        "/api/sales-orders/stats",
        params={"start_date": "2024-02-01T00:00:00", "end_date": "2024-01-01T00:00:00"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "End date must be after start date"


def test_list_date_filters_honour_utc_offset(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 10)
    _order(client, admin_headers, catalog.product["id"], 1)
    now = dt.datetime.now(dt.timezone.utc)

    # An hour ago, written at UTC+05:00.
    since = (now - dt.timedelta(hours=1)).astimezone(dt.timezone(dt.timedelta(hours=5)))
    recent = client.get("/api/sales-orders", params={"start_date": since.isoformat()}, headers=admin_headers)
    assert recent.status_code == 200, recent.text
    assert recent.json()["pagination"]["total"] == 1

    # An hour from now, written at UTC-05:00.
    later = (now + dt.timedelta(hours=1)).astimezone(dt.timezone(dt.timedelta(hours=-5)))
    future = client.get("/api/sales-orders", params={"start_date": later.isoformat()}, headers=admin_headers)
    assert future.json()["pagination"]["total"] == 0
