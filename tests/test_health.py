def test_root_banner(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Inventory Management API"


def test_healthz_and_live(client):
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/live").json() == {"status": "alive"}


def test_security_headers(client):
    resp = client.get("/live")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_openapi_available_outside_production(client):
    resp = client.get("/openapi.json")
    assert resp.status_code == 200
    assert "/api/products" in resp.json()["paths"]
