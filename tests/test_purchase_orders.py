from decimal import Decimal

import pytest


@pytest.fixture
def purchase_order(client, admin_headers, catalog):
    resp = client.post(
        "/api/purchase-orders",
        json={
            "supplier_id": catalog.supplier["id"],
            "items": [{"product_id": catalog.product["id"], "quantity": 20, "unit_price": "5.50"}],
            "notes": "Quarterly restock",
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_purchase_order(purchase_order, catalog):
    assert purchase_order["status"] == "open"
    assert purchase_order["supplier"]["id"] == catalog.supplier["id"]
    assert purchase_order["notes"] == "Quarterly restock"
    assert Decimal(purchase_order["total_amount"]) == Decimal("110.00")
    assert purchase_order["items"][0]["product"]["sku"] == "MOUSE-001"
    assert purchase_order["received_at"] is None


def test_create_requires_items_and_known_products(client, admin_headers, catalog):
    empty = client.post(
        "/api/purchase-orders", json={"supplier_id": catalog.supplier["id"], "items": []}, headers=admin_headers
    )
    assert empty.status_code == 400

    unknown = client.post(
        "/api/purchase-orders",
        json={
            "supplier_id": catalog.supplier["id"],
            "items": [{"product_id": 999, "quantity": 1, "unit_price": "1.00"}],
        },
        headers=admin_headers,
    )
    assert unknown.status_code == 400
    assert unknown.json()["details"]["product_ids"] == [999]


def test_receive_into_existing_stock(client, admin_headers, purchase_order, catalog, add_stock, stock_qty):
    stock = add_stock(catalog.loc_b, 5)
    resp = client.post(f"/api/purchase-orders/{purchase_order['id']}/receive", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "received"
    assert body["received_at"] is not None
    assert stock_qty(stock["id"]) == 25

    history = client.get(f"/api/stock/{stock['id']}/movements", headers=admin_headers).json()
    latest = history["data"][0]
    assert latest["reason"] == f"Purchase Order #{purchase_order['id']} received"
    assert latest["reference_type"] == "purchase_order"
    assert latest["reference_id"] == purchase_order["id"]


def test_receive_without_stock_uses_first_warehouse_location(client, admin_headers, purchase_order, catalog):
    client.post(f"/api/purchase-orders/{purchase_order['id']}/receive", headers=admin_headers)
    stock = client.get(f"/api/products/{catalog.product['id']}/stock", headers=admin_headers).json()
    assert stock["total_quantity"] == 20
    assert stock["stocks"][0]["location"]["id"] == catalog.loc_a["id"]


def test_receive_at_given_location(client, admin_headers, purchase_order, catalog, add_stock):
    add_stock(catalog.loc_a, 1)
    client.post(
        f"/api/purchase-orders/{purchase_order['id']}/receive",
        json={"location_id": catalog.loc_b["id"]},
        headers=admin_headers,
    )
    at_b = client.get("/api/stock", params={"location_id": catalog.loc_b["id"]}, headers=admin_headers).json()
    assert at_b["data"][0]["quantity"] == 20


def test_receive_twice_rejected(client, admin_headers, purchase_order):
    client.post(f"/api/purchase-orders/{purchase_order['id']}/receive", headers=admin_headers)
    again = client.post(f"/api/purchase-orders/{purchase_order['id']}/receive", headers=admin_headers)
    assert again.status_code == 400
    assert again.json()["message"] == "Purchase order has already been received"


def test_cancelled_order_cannot_be_received(client, admin_headers, purchase_order):
    cancel = client.patch(
        f"/api/purchase-orders/{purchase_order['id']}", json={"status": "cancelled"}, headers=admin_headers
    )
    assert cancel.status_code == 200
    resp = client.post(f"/api/purchase-orders/{purchase_order['id']}/receive", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Cannot receive a cancelled purchase order"

    reopen = client.patch(
        f"/api/purchase-orders/{purchase_order['id']}", json={"status": "open"}, headers=admin_headers
    )
    assert reopen.status_code == 400
    assert reopen.json()["message"] == "Cannot update a cancelled purchase order"


def test_status_received_only_via_receive(client, admin_headers, purchase_order):
    resp = client.patch(
        f"/api/purchase-orders/{purchase_order['id']}", json={"status": "received"}, headers=admin_headers
    )
    assert resp.status_code == 400


def test_received_order_is_final(client, admin_headers, purchase_order):
    client.post(f"/api/purchase-orders/{purchase_order['id']}/receive", headers=admin_headers)
    update = client.patch(
        f"/api/purchase-orders/{purchase_order['id']}", json={"status": "cancelled"}, headers=admin_headers
    )
    assert update.status_code == 400
    assert update.json()["message"] == "Cannot update a received purchase order"
    delete = client.delete(f"/api/purchase-orders/{purchase_order['id']}", headers=admin_headers)
    assert delete.status_code == 400


def test_list_filter_and_delete(client, admin_headers, purchase_order):
    listed = client.get("/api/purchase-orders", params={"status": "open"}, headers=admin_headers).json()
    assert listed["pagination"]["total"] == 1

    assert client.delete(f"/api/purchase-orders/{purchase_order['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/purchase-orders/{purchase_order['id']}", headers=admin_headers).status_code == 404


def test_receive_without_any_location_rejected(client, admin_headers, catalog):
    bare = client.post(
        "/api/warehouses", json={"name": "Bare", "capacity": 10, "address": "2 Empty Lot"}, headers=admin_headers
    ).json()
    product = client.post(
        "/api/products",
        json={
            "name": "Desk Lamp",
            "sku": "LAMP-001",
            "barcode": "5012345000066",
            "category_id": catalog.category["id"],
            "supplier_id": catalog.supplier["id"],
            "warehouse_id": bare["id"],
            "unit_price": "9.00",
            "price": "24.00",
        },
        headers=admin_headers,
    ).json()
    po = client.post(
        "/api/purchase-orders",
        json={
            "supplier_id": catalog.supplier["id"],
            "items": [{"product_id": product["id"], "quantity": 4, "unit_price": "9.00"}],
        },
        headers=admin_headers,
    ).json()

    resp = client.post(f"/api/purchase-orders/{po['id']}/receive", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "No location available to receive product Desk Lamp"

    assert client.get(f"/api/purchase-orders/{po['id']}", headers=admin_headers).json()["status"] == "open"
    stock = client.get(f"/api/products/{product['id']}/stock", headers=admin_headers).json()
    assert stock["total_quantity"] == 0
    assert stock["stocks"] == []
