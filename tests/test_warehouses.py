def test_capacity_must_be_positive(client, admin_headers):
    resp = client.post(
        "/api/warehouses", json={"name": "Tiny", "capacity": 0, "address": "Nowhere"}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "capacity"


def test_warehouse_detail_shows_locations_and_stock(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 4)
    detail = client.get(f"/api/warehouses/{catalog.warehouse['id']}", headers=admin_headers).json()
    assert [loc["name"] for loc in detail["locations"]] == ["A1", "B1"]
    assert detail["locations"][0]["stocks"][0]["quantity"] == 4
    assert detail["product_count"] == 1
    assert detail["stock_count"] == 1


def test_update_warehouse(client, admin_headers, catalog):
    resp = client.patch(
        f"/api/warehouses/{catalog.warehouse['id']}", json={"capacity": 2500}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["capacity"] == 2500


def test_location_with_stock_cannot_be_deleted(client, admin_headers, catalog, add_stock):
    add_stock(catalog.loc_a, 1)
    blocked = client.delete(f"/api/warehouses/locations/{catalog.loc_a['id']}", headers=admin_headers)
    assert blocked.status_code == 400

    freed = client.delete(f"/api/warehouses/locations/{catalog.loc_b['id']}", headers=admin_headers)
    assert freed.status_code == 204
    detail = client.get(f"/api/warehouses/{catalog.warehouse['id']}", headers=admin_headers).json()
    assert [loc["name"] for loc in detail["locations"]] == ["A1"]


def test_delete_empty_warehouse_removes_locations(client, admin_headers):
    warehouse = client.post(
        "/api/warehouses", json={"name": "Overflow", "capacity": 10, "address": "Dock 3"}, headers=admin_headers
    ).json()
    client.post(f"/api/warehouses/{warehouse['id']}/locations", json={"name": "D1"}, headers=admin_headers)

    assert client.delete(f"/api/warehouses/{warehouse['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/warehouses/{warehouse['id']}", headers=admin_headers).status_code == 404


def test_warehouse_with_products_cannot_be_deleted(client, admin_headers, catalog):
    resp = client.delete(f"/api/warehouses/{catalog.warehouse['id']}", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["details"]["product_count"] == 1
