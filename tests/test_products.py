from decimal import Decimal


def _product_payload(catalog, **overrides):
    payload = {
        "name": "USB-C Cable",
        "sku": "CABLE-001",
        "barcode": "5012345000011",
        "category_id": catalog.category["id"],
        "supplier_id": catalog.supplier["id"],
        "warehouse_id": catalog.warehouse["id"],
        "unit_price": "2.50",
        "price": "5.00",
    }
    payload.update(overrides)
    return payload


def test_create_product_returns_nested_refs(client, admin_headers, catalog):
    resp = client.post("/api/products", json=_product_payload(catalog), headers=admin_headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["category"]["name"] == "Electronics"
    assert body["supplier"]["email"] == "sales@acme.com"
    assert body["warehouse"]["id"] == catalog.warehouse["id"]
    assert Decimal(body["unit_price"]) == Decimal("2.50")
    assert Decimal(body["profit_margin"]) == Decimal("100.00")
    assert body["total_quantity"] == 0


def test_duplicate_sku_and_barcode_rejected(client, admin_headers, catalog):
    dup_sku = client.post(
        "/api/products",
        json=_product_payload(catalog, sku="MOUSE-001"),
        headers=admin_headers,
    )
    assert dup_sku.status_code == 400
    assert dup_sku.json()["message"] == "Product with same SKU already exists"

    dup_barcode = client.post(
        "/api/products",
        json=_product_payload(catalog, barcode="5012345000028"),
        headers=admin_headers,
    )
    assert dup_barcode.status_code == 400
    assert dup_barcode.json()["message"] == "Product with same barcode already exists"


def test_unknown_category_is_bad_request(client, admin_headers, catalog):
    resp = client.post(
        "/api/products", json=_product_payload(catalog, category_id=999), headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category with ID 999 not found"


def test_negative_price_fails_validation(client, admin_headers, catalog):
    resp = client.post(
        "/api/products", json=_product_payload(catalog, price="-1"), headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "price"


def test_list_search_and_pagination(client, admin_headers, catalog):
    for i in range(3):
        client.post(
            "/api/products",
            json=_product_payload(catalog, name=f"Cable {i}", sku=f"CABLE-{i}", barcode=f"BC-{i}"),
            headers=admin_headers,
        )

    page = client.get("/api/products", params={"page": 1, "page_size": 2}, headers=admin_headers).json()
    assert len(page["data"]) == 2
    assert page["pagination"] == {"total": 4, "page": 1, "page_size": 2, "total_pages": 2}

    found = client.get("/api/products", params={"search": "cable"}, headers=admin_headers).json()
    assert found["pagination"]["total"] == 3

    by_barcode = client.get("/api/products", params={"search": "BC-1"}, headers=admin_headers).json()
    assert [p["sku"] for p in by_barcode["data"]] == ["CABLE-1"]


def test_get_missing_product_is_404(client, admin_headers):
    resp = client.get("/api/products/12345", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Product not found"


def test_update_product(client, admin_headers, catalog):
    product_id = catalog.product["id"]
    resp = client.patch(
        f"/api/products/{product_id}", json={"price": "18.00", "name": "Mouse Pro"}, headers=admin_headers
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["name"] == "Mouse Pro"
    assert Decimal(resp.json()["price"]) == Decimal("18.00")

    empty = client.patch(f"/api/products/{product_id}", json={}, headers=admin_headers)
    assert empty.status_code == 400


def test_update_to_taken_sku_rejected(client, admin_headers, catalog):
    other = client.post("/api/products", json=_product_payload(catalog), headers=admin_headers).json()
    resp = client.patch(f"/api/products/{other['id']}", json={"sku": "MOUSE-001"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Product with same SKU already exists"


def test_product_detail_and_stock(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 5)
    add_stock(catalog.loc_b, 7)
    product_id = catalog.product["id"]

    detail = client.get(f"/api/products/{product_id}", headers=admin_headers).json()
    assert detail["total_quantity"] == 12
    assert len(detail["stocks"]) == 2
    assert detail["stocks"][0]["recent_movements"][0]["reason"] == "Opening stock"

    stock = client.get(f"/api/products/{product_id}/stock", headers=admin_headers).json()
    assert stock["total_quantity"] == 12
    assert {s["location"]["name"] for s in stock["stocks"]} == {"A1", "B1"}


def test_delete_product_blocked_by_stock(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 1)
    resp = client.delete(f"/api/products/{catalog.product['id']}", headers=admin_headers)
    assert resp.status_code == 400
    assert "stock" in resp.json()["details"]


def test_delete_product(client, admin_headers, catalog):
    product_id = catalog.product["id"]
    assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/products/{product_id}", headers=admin_headers).status_code == 404
