def test_inventory_requires_authentication(client):
    resp = client.get("/api/products")
    assert resp.status_code == 401


def test_user_cannot_write_catalogue(client, user_headers):
    resp = client.post("/api/categories", json={"name": "Tools"}, headers=user_headers)
    assert resp.status_code == 403
    body = resp.json()
    assert body["code"] == "AUT301"
    assert set(body["details"]["required_roles"]) == {"admin", "manager"}


def test_user_can_read(client, user_headers, catalog):
    resp = client.get("/api/products", headers=user_headers)
    assert resp.status_code == 200
    assert resp.json()["pagination"]["total"] == 1


def test_manager_writes_but_cannot_delete(client, manager_headers, admin_headers):
    created = client.post("/api/categories", json={"name": "Tools"}, headers=manager_headers)
    assert created.status_code == 201
    category_id = created.json()["id"]

    denied = client.delete(f"/api/categories/{category_id}", headers=manager_headers)
    assert denied.status_code == 403

    deleted = client.delete(f"/api/categories/{category_id}", headers=admin_headers)
    assert deleted.status_code == 204


def test_audit_log_is_admin_only(client, manager_headers, admin_headers):
    assert client.get("/api/audit-logs", headers=manager_headers).status_code == 403
    assert client.get("/api/audit-logs", headers=admin_headers).status_code == 200


def test_metrics_is_admin_only(client, user_headers, admin_headers):
    assert client.get("/metrics").status_code == 401
    assert client.get("/metrics", headers=user_headers).status_code == 403
    resp = client.get("/metrics", headers=admin_headers)
    assert resp.status_code == 200
    assert "inventory_stock_transfers_total" in resp.text
