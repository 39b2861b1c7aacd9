from decimal import Decimal

WIDE_RANGE = {"start_date": "2000-01-01T00:00:00", "end_date": "2100-01-01T00:00:00"}


def test_inventory_value_uses_cost_price(client, user_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 10)
    add_stock(catalog.loc_b, 5)
    report = client.get("/api/reports/inventory-value", headers=user_headers).json()
    assert Decimal(report["total_value"]) == Decimal("90.00")
    assert report["value_by_warehouse"][0]["warehouse_id"] == catalog.warehouse["id"]
    assert Decimal(report["value_by_warehouse"][0]["total_value"]) == Decimal("90.00")


def test_low_stock_threshold(client, user_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 3)
    add_stock(catalog.loc_b, 50)

    default = client.get("/api/reports/low-stock", headers=user_headers).json()
    assert default["threshold"] == 10
    assert [item["location_name"] for item in default["items"]] == ["A1"]

    custom = client.get("/api/reports/low-stock", params={"threshold": 100}, headers=user_headers).json()
    assert len(custom["items"]) == 2


def test_stock_movement_report(client, admin_headers, catalog, add_stock):
    stock = add_stock(catalog.loc_a, 10)
    client.post(
        f"/api/stock/{stock['id']}/movements",
        json={"movement_type": "OUT", "quantity": 3, "reason": "Sample"},
        headers=admin_headers,
    )
    report = client.get("/api/reports/stock-movements", params=WIDE_RANGE, headers=admin_headers).json()
    assert len(report["movements"]) == 2
    assert report["movements"][0]["product_name"] == "Wireless Mouse"
    assert report["summary"]["IN"] == {"count": 1, "total_quantity": 10}
    assert report["summary"]["OUT"] == {"count": 1, "total_quantity": 3}


def test_sales_report_excludes_cancelled(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 10)

    def _order(qty):
        return client.post(
            "/api/sales-orders",
            json={
                "customer_id": 3,
                "items": [{"product_id": catalog.product["id"], "quantity": qty, "unit_price": "15.00"}],
            },
            headers=admin_headers,
        ).json()

    _order(2)
    cancelled = _order(1)
    client.post(f"/api/sales-orders/{cancelled['id']}/cancel", headers=admin_headers)

    report = client.get("/api/reports/sales", params=WIDE_RANGE, headers=admin_headers).json()
    assert report["order_count"] == 1
    assert Decimal(report["total_sales"]) == Decimal("30.00")
    assert report["sales_by_product"][0]["quantity"] == 2


def test_purchase_report(client, admin_headers, catalog):
    client.post(
        "/api/purchase-orders",
        json={
            "supplier_id": catalog.supplier["id"],
            "items": [{"product_id": catalog.product["id"], "quantity": 4, "unit_price": "6.25"}],
        },
        headers=admin_headers,
    )
    report = client.get("/api/reports/purchases", params=WIDE_RANGE, headers=admin_headers).json()
    assert report["order_count"] == 1
    assert Decimal(report["total_purchases"]) == Decimal("25.00")
    assert report["purchases_by_supplier"][0]["supplier_name"] == "Acme Components"


def test_warehouse_utilization(client, user_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 250)
    report = client.get("/api/reports/warehouse-utilization", headers=user_headers).json()
    assert report == [
        {
            "warehouse_id": catalog.warehouse["id"],
            "warehouse_name": "Main",
            "capacity": 1000,
            "total_items": 250,
            "utilization_rate": 25.0,
            "location_count": 2,
        }
    ]


def test_date_range_required_and_ordered(client, user_headers):
    missing = client.get("/api/reports/sales", headers=user_headers)
    assert missing.status_code == 400

    reversed_range = client.get(
        "/api/reports/purchases",
        params={"start_date": "2024-03-01T00:00:00", "end_date": "2024-01-01T00:00:00"},
        headers=user_headers,
    )
    assert reversed_range.status_code == 400
    assert reversed_range.json()["message"] == "End date must be after start date"
