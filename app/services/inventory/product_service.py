"""
Product Service - CRUD operations for products.

SKU and barcode are unique across the whole catalogue. Products are hard
deleted, which is only allowed once nothing references them.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, ValidationFailedError
from app.models.inventory_models import (
    Category,
    Product,
    PurchaseOrderItem,
    SalesOrderItem,
    Stock,
    Supplier,
    Warehouse,
)
from app.models.inventory_schemas import ProductCreate, ProductUpdate
from app.services.inventory.base import BaseInventoryService

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"name", "sku", "barcode", "category_id", "supplier_id", "warehouse_id", "unit_price", "price"}


class ProductService(BaseInventoryService):
    """Service for product operations."""

    def _ensure_unique(self, sku: str | None, barcode: str | None, exclude_id: int | None = None) -> None:
        if sku is not None:
            stmt = select(Product.id).where(Product.sku == sku)
            if exclude_id is not None:
                stmt = stmt.where(Product.id != exclude_id)
            if self._db.scalar(stmt) is not None:
                raise ConflictError("Product with same SKU already exists", {"sku": sku})
        if barcode is not None:
            stmt = select(Product.id).where(Product.barcode == barcode)
            if exclude_id is not None:
                stmt = stmt.where(Product.id != exclude_id)
            if self._db.scalar(stmt) is not None:
                raise ConflictError("Product with same barcode already exists", {"barcode": barcode})

    def _ensure_references(
        self,
        category_id: int | None = None,
        supplier_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> None:
        """Referenced rows must exist; a missing one is a bad request, not a 404."""
        checks = (
            (Category, category_id, "Category"),
            (Supplier, supplier_id, "Supplier"),
            (Warehouse, warehouse_id, "Warehouse"),
        )
        for model, ref_id, label in checks:
            if ref_id is not None and self._db.get(model, ref_id) is None:
                raise ValidationFailedError(
                    f"{label} with ID {ref_id} not found",
                    {f"{label.lower()}_id": ref_id},
                )

    def create_product(self, data: ProductCreate) -> Product:
        with self._atomic():
            self._ensure_unique(data.sku, data.barcode)
            self._ensure_references(data.category_id, data.supplier_id, data.warehouse_id)

            product = Product(**data.model_dump())
            self._db.add(product)
            self._db.flush()
            self._audit("create", "product", product.id, sku=product.sku, name=product.name)

        logger.info("Created product: %s (sku=%s)", product.name, product.sku)
        return product

    def get_product(self, product_id: int) -> Product:
        return self._get_or_404(Product, product_id)

    def list_products(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str | None = None,
        category_id: int | None = None,
        supplier_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> tuple[Sequence[Product], int]:
        """
        List products with filtering and pagination.

        Returns a tuple of (products, total_count).
        """
        stmt = select(Product)

        if search:
            search_term = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Product.name.ilike(search_term),
                    Product.sku.ilike(search_term),
                    Product.barcode.ilike(search_term),
                )
            )
        if category_id:
            stmt = stmt.where(Product.category_id == category_id)
        if supplier_id:
            stmt = stmt.where(Product.supplier_id == supplier_id)
        if warehouse_id:
            stmt = stmt.where(Product.warehouse_id == warehouse_id)

        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        products = self._db.scalars(
            stmt.options(
                selectinload(Product.category),
                selectinload(Product.supplier),
                selectinload(Product.warehouse),
                selectinload(Product.stocks),
            )
            .order_by(Product.name, Product.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()

        return products, total

    def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        with self._atomic():
            product = self.get_product(product_id)

            update_data = data.model_dump(exclude_unset=True)
            for key in _REQUIRED_FIELDS & update_data.keys():
                if update_data[key] is None:
                    raise ValidationFailedError(f"{key} cannot be null", {"field": key})

            self._ensure_unique(
                update_data.get("sku") if update_data.get("sku") != product.sku else None,
                update_data.get("barcode") if update_data.get("barcode") != product.barcode else None,
                exclude_id=product.id,
            )
            self._ensure_references(
                update_data.get("category_id"),
                update_data.get("supplier_id"),
                update_data.get("warehouse_id"),
            )

            for key, value in update_data.items():
                setattr(product, key, value)
            self._audit("update", "product", product.id, changes=update_data)

        logger.info("Updated product: %s (id=%s)", product.name, product.id)
        return product

    def delete_product(self, product_id: int) -> None:
        with self._atomic():
            product = self.get_product(product_id)
            references = {
                "stock": self._db.scalar(select(func.count(Stock.id)).where(Stock.product_id == product.id)),
                "purchase_order_items": self._db.scalar(
                    select(func.count(PurchaseOrderItem.id)).where(PurchaseOrderItem.product_id == product.id)
                ),
                "sales_order_items": self._db.scalar(
                    select(func.count(SalesOrderItem.id)).where(SalesOrderItem.product_id == product.id)
                ),
            }
            blocking = {name: count for name, count in references.items() if count}
            if blocking:
                raise ConflictError("Cannot delete product with existing stock or order history", blocking)

            self._db.delete(product)
            self._audit("delete", "product", product_id, sku=product.sku)
        logger.info("Deleted product: %s (id=%s)", product.name, product_id)

    def get_product_stock(self, product_id: int) -> tuple[Product, list[Stock]]:
        """Stock rows of a product across every location."""
        product = self.get_product(product_id)
        stocks = list(
            self._db.scalars(
                select(Stock)
                .where(Stock.product_id == product.id)
                .options(
                    selectinload(Stock.product),
                    selectinload(Stock.warehouse),
                    selectinload(Stock.location),
                )
                .order_by(Stock.id)
            )
        )
        return product, stocks
