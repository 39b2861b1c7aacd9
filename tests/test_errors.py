from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.errors import register_error_handlers
from app.core.exceptions import InsufficientStockError, NotFoundError


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/missing")
    def missing():
        raise NotFoundError("Widget", 3)

    @app.get("/short")
    def short():
        raise InsufficientStockError(details={"available": 1})

    @app.get("/integrity")
    def integrity():
        raise IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))

    @app.get("/database")
    def database():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    @app.get("/boom")
    def boom():
        raise RuntimeError("unexpected")

    @app.get("/items/{item_id}")
    def item(item_id: int):
        return {"id": item_id}

    return app


client = TestClient(_app(), raise_server_exceptions=False)


def test_application_error_body():
    resp = client.get("/missing")
    assert resp.status_code == 404
    assert resp.json() == {
        "status": "error",
        "message": "Widget not found",
        "code": "GEN001",
        "details": {"entity": "Widget", "id": 3},
    }


def test_insufficient_stock_maps_to_400():
    resp = client.get("/short")
    assert resp.status_code == 400
    assert resp.json()["code"] == "STK100"


def test_integrity_error_maps_to_400():
    resp = client.get("/integrity")
    assert resp.status_code == 400
    assert resp.json()["message"] == "A unique constraint violation occurred"


def test_database_error_maps_to_400():
    resp = client.get("/database")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Database operation failed"


def test_unhandled_error_has_correlation_id():
    resp = client.get("/boom")
    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "Internal server error"
    assert len(body["cid"]) == 32


def test_request_validation_error_shape():
    resp = client.get("/items/abc")
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed"
    assert body["errors"][0]["field"] == "item_id"
