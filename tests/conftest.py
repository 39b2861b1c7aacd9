from __future__ import annotations

import os
import warnings
from types import SimpleNamespace

# Settings are resolved at import time; select the test profile before any app import.
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api.main import app  # noqa: E402
from app.api.rate_limit import limiter  # noqa: E402
from app.core.security import create_access_token, hash_password  # noqa: E402
from app.db.base_class import Base  # noqa: E402
from app.db.session import SessionLocal  # noqa: E402
from app.db.session import engine as test_engine  # noqa: E402
from app.models.models import User, UserRole  # noqa: E402

# Suppress known third-party deprecation warnings (e.g., passlib crypt removal) to keep test output clean.
warnings.filterwarnings("ignore", category=DeprecationWarning, module="passlib.utils")

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def db_session():
    """Provide a database session for direct setup and assertions."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture
def client():
    """Provide a FastAPI TestClient bound to the application."""
    return TestClient(app)


def create_user(username: str, role: UserRole = UserRole.USER, is_active: bool = True) -> User:
    session = SessionLocal()
    try:
        user = User(
            username=username,
            hashed_password=hash_password(PASSWORD),
            role=role.value,
            is_active=is_active,
        )
        session.add(user)
        session.commit()
        return user
    finally:
        session.close()


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user.id), user.role)}"}


@pytest.fixture
def admin_user() -> User:
    return create_user("admin", UserRole.ADMIN)


@pytest.fixture
def admin_headers(admin_user) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def manager_headers() -> dict[str, str]:
    return auth_headers(create_user("manager", UserRole.MANAGER))


@pytest.fixture
def user_headers() -> dict[str, str]:
    return auth_headers(create_user("clerk", UserRole.USER))


@pytest.fixture
def catalog(client, admin_headers):
    """A category, supplier, warehouse with two locations and one product."""
    category = client.post(
        "/api/categories", json={"name": "Electronics"}, headers=admin_headers
    ).json()
    supplier = client.post(
        "/api/suppliers",
        json={"name": "Acme Components", "email": "sales@acme.com"},
        headers=admin_headers,
    ).json()
    warehouse = client.post(
        "/api/warehouses",
        json={"name": "Main", "capacity": 1000, "address": "1 Industrial Way"},
        headers=admin_headers,
    ).json()
    loc_a = client.post(
        f"/api/warehouses/{warehouse['id']}/locations", json={"name": "A1"}, headers=admin_headers
    ).json()
    loc_b = client.post(
        f"/api/warehouses/{warehouse['id']}/locations", json={"name": "B1"}, headers=admin_headers
    ).json()
    product = client.post(
        "/api/products",
        json={
            "name": "Wireless Mouse",
            "sku": "MOUSE-001",
            "barcode": "5012345000028",
            "category_id": category["id"],
            "supplier_id": supplier["id"],
            "warehouse_id": warehouse["id"],
            "unit_price": "6.00",
            "price": "15.00",
        },
        headers=admin_headers,
    ).json()
    return SimpleNamespace(
        category=category,
        supplier=supplier,
        warehouse=warehouse,
        loc_a=loc_a,
        loc_b=loc_b,
        product=product,
    )


@pytest.fixture
def make_user():
    return create_user


@pytest.fixture
def add_stock(client, admin_headers, catalog):
    """Factory: create a stock row and book ``quantity`` into it with an IN movement."""

    def _add(location, quantity: int, product=None) -> dict:
        return _add_stock(client, admin_headers, catalog, location, quantity, product or catalog.product)

    return _add


@pytest.fixture
def stock_qty(client, admin_headers):
    def _qty(stock_id: int) -> int:
        resp = client.get(f"/api/stock/{stock_id}", headers=admin_headers)
        assert resp.status_code == 200, resp.text
        return resp.json()["quantity"]

    return _qty


def _add_stock(client, headers, catalog, location, quantity: int, product) -> dict:
    stock = client.post(
        "/api/stock",
        json={
            "product_id": product["id"],
            "warehouse_id": catalog.warehouse["id"],
            "location_id": location["id"],
        },
        headers=headers,
    )
    assert stock.status_code == 201, stock.text
    stock = stock.json()
    if quantity:
        resp = client.post(
            f"/api/stock/{stock['id']}/movements",
            json={"movement_type": "IN", "quantity": quantity, "reason": "Opening stock"},
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
    return stock

