from decimal import Decimal


def test_create_and_list_suppliers(client, admin_headers):
    resp = client.post(
        "/api/suppliers",
        json={"name": "Paperworks", "email": "orders@paperworks.com", "phone": "+44 20 5550 0199"},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["product_count"] == 0

    listed = client.get("/api/suppliers", params={"search": "paper"}, headers=admin_headers).json()
    assert listed["pagination"]["total"] == 1
    assert listed["data"][0]["email"] == "orders@paperworks.com"


def test_duplicate_email_rejected(client, admin_headers, catalog):
    resp = client.post(
        "/api/suppliers", json={"name": "Copycat", "email": "SALES@acme.com"}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Supplier with same email already exists"


def test_invalid_email_fails_validation(client, admin_headers):
    resp = client.post("/api/suppliers", json={"name": "Nobody", "email": "not-an-email"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "email"


def test_supplier_detail_lists_products_and_orders(client, admin_headers, catalog):
    client.post(
        "/api/purchase-orders",
        json={
            "supplier_id": catalog.supplier["id"],
            "items": [{"product_id": catalog.product["id"], "quantity": 3, "unit_price": "6.00"}],
        },
        headers=admin_headers,
    )
    detail = client.get(f"/api/suppliers/{catalog.supplier['id']}", headers=admin_headers).json()
    assert [p["sku"] for p in detail["products"]] == ["MOUSE-001"]
    assert detail["purchase_order_count"] == 1
    assert Decimal(detail["recent_purchase_orders"][0]["total_amount"]) == Decimal("18.00")


def test_supplier_stats_exclude_cancelled_spend(client, admin_headers, catalog):
    def _order(qty):
        return client.post(
            "/api/purchase-orders",
            json={
                "supplier_id": catalog.supplier["id"],
                "items": [{"product_id": catalog.product["id"], "quantity": qty, "unit_price": "10.00"}],
            },
            headers=admin_headers,
        ).json()

    _order(2)
    cancelled = _order(5)
    client.patch(f"/api/purchase-orders/{cancelled['id']}", json={"status": "cancelled"}, headers=admin_headers)

    stats = client.get(f"/api/suppliers/{catalog.supplier['id']}/stats", headers=admin_headers).json()
    assert stats["total_orders"] == 2
    assert stats["total_products"] == 1
    assert stats["orders_by_status"] == {"open": 1, "cancelled": 1}
    assert Decimal(stats["total_spent"]) == Decimal("20.00")

    overall = client.get("/api/suppliers/stats", headers=admin_headers).json()
    assert overall["total_orders"] == 2


def test_supplier_with_products_cannot_be_deleted(client, admin_headers, catalog):
    resp = client.delete(f"/api/suppliers/{catalog.supplier['id']}", headers=admin_headers)
    assert resp.status_code == 400


def test_update_and_delete_supplier(client, admin_headers):
    supplier = client.post(
        "/api/suppliers", json={"name": "Temp", "email": "temp@vendor.com"}, headers=admin_headers
    ).json()
    updated = client.patch(
        f"/api/suppliers/{supplier['id']}", json={"contact_name": "Dana"}, headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["contact_name"] == "Dana"
    assert client.delete(f"/api/suppliers/{supplier['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/suppliers/{supplier['id']}", headers=admin_headers).status_code == 404
