"""
Supplier Service - CRUD operations and purchasing statistics for suppliers.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, or_, select

from app.core.exceptions import ConflictError
from app.models.inventory_models import (
    Product,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    Supplier,
)
from app.models.inventory_schemas import SupplierCreate, SupplierStats, SupplierUpdate
from app.services.inventory.base import BaseInventoryService

logger = logging.getLogger(__name__)


class SupplierService(BaseInventoryService):
    """Service for supplier operations."""

    def _ensure_unique_email(self, email: str, exclude_id: int | None = None) -> None:
        stmt = select(Supplier.id).where(func.lower(Supplier.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(Supplier.id != exclude_id)
        if self._db.scalar(stmt) is not None:
            raise ConflictError("Supplier with same email already exists", {"email": email})

    def create(self, data: SupplierCreate) -> Supplier:
        with self._atomic():
            self._ensure_unique_email(data.email)
            supplier = Supplier(**data.model_dump())
            self._db.add(supplier)
            self._db.flush()
            self._audit("create", "supplier", supplier.id, name=supplier.name, email=supplier.email)
        logger.info("Created supplier: %s (id=%s)", supplier.name, supplier.id)
        return supplier

    def get(self, supplier_id: int) -> Supplier:
        return self._get_or_404(Supplier, supplier_id)

    def list(
        self,
        search: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[Sequence[Supplier], int]:
        stmt = select(Supplier)
        if search:
            term = f"%{search}%"
            stmt = stmt.where(or_(Supplier.name.ilike(term), Supplier.email.ilike(term)))
        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        suppliers = self._db.scalars(
            stmt.order_by(Supplier.name, Supplier.id).offset((page - 1) * page_size).limit(page_size)
        ).all()
        return suppliers, total

    def update(self, supplier_id: int, data: SupplierUpdate) -> Supplier:
        with self._atomic():
            supplier = self.get(supplier_id)
            update_data = data.model_dump(exclude_unset=True)
            for key in ("name", "email"):
                if key in update_data and update_data[key] is None:
                    update_data.pop(key)
            if "email" in update_data and update_data["email"].lower() != supplier.email.lower():
                self._ensure_unique_email(update_data["email"], exclude_id=supplier.id)
            for key, value in update_data.items():
                setattr(supplier, key, value)
            self._audit("update", "supplier", supplier.id, changes=update_data)
        logger.info("Updated supplier: %s (id=%s)", supplier.name, supplier.id)
        return supplier

    def delete(self, supplier_id: int) -> None:
        with self._atomic():
            supplier = self.get(supplier_id)
            product_count = self._db.scalar(
                select(func.count(Product.id)).where(Product.supplier_id == supplier.id)
            )
            order_count = self._db.scalar(
                select(func.count(PurchaseOrder.id)).where(PurchaseOrder.supplier_id == supplier.id)
            )
            if product_count or order_count:
                raise ConflictError(
                    "Cannot delete supplier with associated products or purchase orders",
                    {"product_count": product_count, "purchase_order_count": order_count},
                )
            self._db.delete(supplier)
            self._audit("delete", "supplier", supplier_id, name=supplier.name)
        logger.info("Deleted supplier: %s (id=%s)", supplier.name, supplier_id)

    def stats(self, supplier_id: int | None = None) -> SupplierStats:
        """
        Purchasing statistics for one supplier, or for all suppliers when
        ``supplier_id`` is None. ``total_spent`` ignores cancelled orders.
        """
        if supplier_id is not None:
            self.get(supplier_id)

        order_filter = [] if supplier_id is None else [PurchaseOrder.supplier_id == supplier_id]
        product_filter = [] if supplier_id is None else [Product.supplier_id == supplier_id]

        by_status = {
            (status.value if isinstance(status, PurchaseOrderStatus) else status): count
            for status, count in self._db.execute(
                select(PurchaseOrder.status, func.count(PurchaseOrder.id))
                .where(*order_filter)
                .group_by(PurchaseOrder.status)
            )
        }
        total_spent = self._db.scalar(
            select(func.coalesce(func.sum(PurchaseOrderItem.quantity * PurchaseOrderItem.unit_price), 0))
            .join(PurchaseOrder, PurchaseOrderItem.purchase_order_id == PurchaseOrder.id)
            .where(PurchaseOrder.status != PurchaseOrderStatus.CANCELLED, *order_filter)
        )
        total_products = self._db.scalar(select(func.count(Product.id)).where(*product_filter)) or 0

        return SupplierStats(
            total_orders=sum(by_status.values()),
            total_products=total_products,
            total_spent=Decimal(str(total_spent or 0)).quantize(Decimal("0.01")),
            orders_by_status=by_status,
        )

    def counts(self, supplier_id: int) -> tuple[int, int]:
        """(product_count, purchase_order_count) for list/detail responses."""
        product_count = self._db.scalar(
            select(func.count(Product.id)).where(Product.supplier_id == supplier_id)
        ) or 0
        order_count = self._db.scalar(
            select(func.count(PurchaseOrder.id)).where(PurchaseOrder.supplier_id == supplier_id)
        ) or 0
        return product_count, order_count
