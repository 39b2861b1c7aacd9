#!/usr/bin/env python3
"""
Seed a development database with demo users and inventory.

Creates admin/manager/user accounts (password ``password123``), a couple of
categories, suppliers and warehouses with locations, a handful of products and
opening stock booked as IN movements so the history explains every level.

Usage:
    python scripts/seed.py
    python scripts/seed.py --reset   # drop and recreate all tables first
"""
import argparse
import logging
from decimal import Decimal

from sqlalchemy import select

from app.core.logger import init_logging
from app.core.security import hash_password
from app.db.base_class import Base
from app.db.session import SessionLocal, engine
from app.models import inventory_models, models  # noqa: F401  registers tables on Base.metadata
from app.models import inventory_schemas as schemas
from app.models.inventory_models import StockMovementType
from app.models.models import User, UserRole
from app.services.inventory import build_inventory_service

logger = logging.getLogger("seed")

DEMO_PASSWORD = "password123"

USERS = [
    ("admin", UserRole.ADMIN),
    ("manager", UserRole.MANAGER),
    ("user", UserRole.USER),
]

CATEGORIES = [
    ("Electronics", "Devices and accessories"),
    ("Office Supplies", "Paper, pens and desk items"),
]

SUPPLIERS = [
    ("Acme Components", "sales@acme-components.com", "Jane Doe", "+1-555-0100"),
    ("Paperworks Ltd", "orders@paperworks.co.uk", "John Smith", "+44-20-5550-0199"),
]

WAREHOUSES = [
    ("Main Warehouse", 5000, "1 Industrial Way", ["A1", "A2", "B1"]),
    ("Overflow Depot", 1500, "27 Harbour Road", ["D1"]),
]

# name, sku, barcode, category idx, supplier idx, warehouse idx, cost, price, opening qty
PRODUCTS = [
    ("USB-C Cable 1m", "ELEC-USBC-1M", "5012345000011", 0, 0, 0, "2.40", "7.99", 250),
    ("Wireless Mouse", "ELEC-MOUSE-W", "5012345000028", 0, 0, 0, "6.10", "19.99", 80),
    ("27in Monitor", "ELEC-MON-27", "5012345000035", 0, 0, 1, "120.00", "229.00", 6),
    ("A4 Paper (500)", "OFF-A4-500", "5012345000042", 1, 1, 0, "3.20", "5.49", 400),
    ("Gel Pen Black", "OFF-PEN-GB", "5012345000059", 1, 1, 0, "0.35", "1.20", 8),
]


def _ensure_users(db) -> User:
    admin = None
    for username, role in USERS:
        user = db.scalar(select(User).where(User.username == username))
        if user is None:
            user = User(username=username, hashed_password=hash_password(DEMO_PASSWORD), role=role.value)
            db.add(user)
            db.flush()
            logger.info("Created %s user %s", role.value, username)
        if role == UserRole.ADMIN:
            admin = user
    db.commit()
    return admin


def seed(reset: bool = False) -> None:
    if reset:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        admin = _ensure_users(db)
        service = build_inventory_service(db, admin.id)

        existing, _ = service.categories.list_categories(page=1, page_size=1)
        if existing:
            logger.info("Inventory already seeded; skipping catalogue")
            return

        categories = [
            service.categories.create_category(schemas.CategoryCreate(name=name, description=desc))
            for name, desc in CATEGORIES
        ]
        suppliers = [
            service.suppliers.create(
                schemas.SupplierCreate(name=name, email=email, contact_name=contact, phone=phone)
            )
            for name, email, contact, phone in SUPPLIERS
        ]
        warehouses = []
        for name, capacity, address, location_names in WAREHOUSES:
            warehouse = service.warehouses.create(
                schemas.WarehouseCreate(name=name, capacity=capacity, address=address)
            )
            for location_name in location_names:
                service.warehouses.add_location(warehouse.id, schemas.LocationCreate(name=location_name))
            warehouses.append(warehouse)

        for name, sku, barcode, cat, sup, wh, cost, price, qty in PRODUCTS:
            product = service.products.create_product(
                schemas.ProductCreate(
                    name=name,
                    sku=sku,
                    barcode=barcode,
                    category_id=categories[cat].id,
                    supplier_id=suppliers[sup].id,
                    warehouse_id=warehouses[wh].id,
                    unit_price=Decimal(cost),
                    price=Decimal(price),
                )
            )
            location = warehouses[wh].locations[0]
            stock = service.stock.create_stock(
                schemas.StockCreate(product_id=product.id, warehouse_id=warehouses[wh].id, location_id=location.id)
            )
            service.stock.record_movement(
                stock.id,
                schemas.StockMovementCreate(
                    movement_type=StockMovementType.IN, quantity=qty, reason="Opening stock"
                ),
            )
        logger.info("Seeded %d products across %d warehouses", len(PRODUCTS), len(warehouses))
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args()

    init_logging()
    seed(reset=args.reset)
    print(f"Seed complete. Demo accounts: admin, manager, user (password: {DEMO_PASSWORD})")
