def test_category_crud(client, admin_headers):
    created = client.post(
        "/api/categories", json={"name": "Office", "description": "Desk items"}, headers=admin_headers
    )
    assert created.status_code == 201
    category_id = created.json()["id"]
    assert created.json()["product_count"] == 0

    updated = client.patch(
        f"/api/categories/{category_id}", json={"description": "Paper and pens"}, headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["description"] == "Paper and pens"

    listed = client.get("/api/categories", params={"search": "off"}, headers=admin_headers).json()
    assert [c["name"] for c in listed["data"]] == ["Office"]

    assert client.delete(f"/api/categories/{category_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/categories/{category_id}", headers=admin_headers).status_code == 404


def test_duplicate_category_name(client, admin_headers):
    client.post("/api/categories", json={"name": "Office"}, headers=admin_headers)
    resp = client.post("/api/categories", json={"name": "Office"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category with same name already exists"


def test_category_in_use_cannot_be_deleted(client, admin_headers, catalog):
    resp = client.delete(f"/api/categories/{catalog.category['id']}", headers=admin_headers)
    assert resp.status_code == 400
    detail = client.get(f"/api/categories/{catalog.category['id']}", headers=admin_headers).json()
    assert detail["product_count"] == 1
