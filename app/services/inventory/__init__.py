"""
Inventory Service Module.

The InventoryService class is a facade that composes the specialised services
and wires their dependencies, so routes depend on one object.

Usage:
    from app.services.inventory import build_inventory_service

    service = build_inventory_service(db, user_id)

    product = service.products.create_product(data)
    movement = service.stock.record_movement(stock_id, data)
    order = service.sales_orders.create(data)
    report = service.reports.inventory_value()
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from .base import BaseInventoryService, as_utc, ensure_date_range
from .category_service import CategoryService
from .product_service import ProductService
from .purchase_order_service import PurchaseOrderService
from .report_service import ReportService
from .sales_order_service import SalesOrderService
from .stock_service import StockService
from .supplier_service import SupplierService
from .warehouse_service import WarehouseService


class InventoryService:
    """
    Facade for inventory management operations.

    Every sub-service shares the same session and acting user, so a request
    sees one consistent unit of work.
    """

    def __init__(self, db: Session, user_id: int | None):
        self._db = db
        self._user_id = user_id

        self.categories = CategoryService(db, user_id)
        self.products = ProductService(db, user_id)
        self.suppliers = SupplierService(db, user_id)
        self.warehouses = WarehouseService(db, user_id)
        self.stock = StockService(db, user_id)
        self.purchase_orders = PurchaseOrderService(db, user_id)
        self.sales_orders = SalesOrderService(db, user_id)
        self.reports = ReportService(db, user_id)

        # Wire up dependencies
        self.purchase_orders.set_stock_service(self.stock)
        self.sales_orders.set_stock_service(self.stock)

    @property
    def user_id(self) -> int | None:
        return self._user_id


def build_inventory_service(db: Session, user_id: int | None) -> InventoryService:
    """Factory function to create an InventoryService instance."""
    return InventoryService(db=db, user_id=user_id)


__all__ = [
    "InventoryService",
    "build_inventory_service",
    "as_utc",
    "ensure_date_range",
    "BaseInventoryService",
    "CategoryService",
    "ProductService",
    "SupplierService",
    "WarehouseService",
    "StockService",
    "PurchaseOrderService",
    "SalesOrderService",
    "ReportService",
]
