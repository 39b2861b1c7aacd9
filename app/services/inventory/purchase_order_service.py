"""
Purchase Order Service.

Orders are placed ``open``; receiving one books every item into stock in a
single transaction. Received orders are final.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app import metrics
from app.core.exceptions import InvalidStateError, NotFoundError, ValidationFailedError
from app.models.inventory_models import (
    Location,
    Product,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    Stock,
    StockMovementType,
    Supplier,
)
from app.models.inventory_schemas import PurchaseOrderCreate, PurchaseOrderUpdate
from app.models.models import utcnow

from .base import BaseInventoryService
from .stock_service import StockService

logger = logging.getLogger(__name__)


class PurchaseOrderService(BaseInventoryService):
    """Service for purchase order operations."""

    def __init__(self, db: Session, user_id: int | None):
        super().__init__(db, user_id)
        # Stock service dependency for receiving orders
        self._stock_service: StockService | None = None

    def set_stock_service(self, stock_service: StockService) -> None:
        self._stock_service = stock_service

    def create(self, data: PurchaseOrderCreate) -> PurchaseOrder:
        with self._atomic():
            supplier = self._get_or_404(Supplier, data.supplier_id)
            self._ensure_products_exist([item.product_id for item in data.items])

            po = PurchaseOrder(supplier_id=supplier.id, status=PurchaseOrderStatus.OPEN, notes=data.notes)
            for item in data.items:
                po.items.append(
                    PurchaseOrderItem(
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                    )
                )
            self._db.add(po)
            self._db.flush()
            self._audit(
                "create", "purchase_order", po.id,
                supplier_id=supplier.id, item_count=len(po.items), total_amount=po.total_amount,
            )
        logger.info("Created purchase order %s for supplier %s, total %s", po.id, supplier.id, po.total_amount)
        return po

    def get(self, order_id: int) -> PurchaseOrder:
        po = self._db.scalar(
            select(PurchaseOrder)
            .where(PurchaseOrder.id == order_id)
            .options(
                selectinload(PurchaseOrder.supplier),
                selectinload(PurchaseOrder.items).selectinload(PurchaseOrderItem.product),
            )
        )
        if po is None:
            raise NotFoundError("Purchase order", order_id)
        return po

    def list(
        self,
        supplier_id: int | None = None,
        status: PurchaseOrderStatus | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[Sequence[PurchaseOrder], int]:
        stmt = select(PurchaseOrder)
        if supplier_id:
            stmt = stmt.where(PurchaseOrder.supplier_id == supplier_id)
        if status:
            stmt = stmt.where(PurchaseOrder.status == status)

        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        orders = self._db.scalars(
            stmt.options(
                selectinload(PurchaseOrder.supplier),
                selectinload(PurchaseOrder.items).selectinload(PurchaseOrderItem.product),
            )
            .order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        return orders, total

    def update(self, order_id: int, data: PurchaseOrderUpdate) -> PurchaseOrder:
        with self._atomic():
            po = self.get(order_id)
            if po.status == PurchaseOrderStatus.RECEIVED:
                raise InvalidStateError("Cannot update a received purchase order", po.status.value)
            if po.status == PurchaseOrderStatus.CANCELLED:
                raise InvalidStateError("Cannot update a cancelled purchase order", po.status.value)
            if data.status == PurchaseOrderStatus.RECEIVED:
                raise InvalidStateError(
                    "Use the receive endpoint to mark a purchase order as received",
                    po.status.value,
                )
            previous = po.status
            po.status = data.status
            if "notes" in data.model_fields_set:
                po.notes = data.notes
            self._audit(
                "update", "purchase_order", po.id,
                status_from=previous.value, status_to=po.status.value,
            )
        logger.info("Purchase order %s updated: %s -> %s", po.id, previous.value, po.status.value)
        return po

    def receive(self, order_id: int, location_id: int | None = None) -> PurchaseOrder:
        """
        Mark a purchase order as received and add every item to stock.

        Stock for each item goes to the product's row at ``location_id`` when
        given, otherwise to its first existing row, otherwise to a new row at
        the first location of the product's warehouse.
        """
        if self._stock_service is None:
            raise RuntimeError("Stock service not configured for PurchaseOrderService")

        with self._atomic():
            po = self.get(order_id)
            if po.status == PurchaseOrderStatus.RECEIVED:
                raise InvalidStateError("Purchase order has already been received", po.status.value)
            if po.status == PurchaseOrderStatus.CANCELLED:
                raise InvalidStateError("Cannot receive a cancelled purchase order", po.status.value)

            location = None
            if location_id is not None:
                location = self._get_or_404(Location, location_id)

            targets = [self._resolve_receiving_stock_id(item.product, location) for item in po.items]
            locked = self._lock_stocks(targets)

            reason = f"Purchase Order #{po.id} received"
            for item, stock_id in zip(po.items, targets):
                self._stock_service.apply_movement(
                    locked[stock_id],
                    StockMovementType.IN,
                    item.quantity,
                    reason,
                    reference_type="purchase_order",
                    reference_id=po.id,
                )
                self._db.flush()

            po.status = PurchaseOrderStatus.RECEIVED
            po.received_at = utcnow()
            self._audit(
                "receive", "purchase_order", po.id,
                location_id=location_id,
                items=[{"product_id": i.product_id, "quantity": i.quantity} for i in po.items],
            )

        metrics.purchase_order_received()
        logger.info("Purchase order %s received, inventory updated", po.id)
        return po

    def delete(self, order_id: int) -> None:
        with self._atomic():
            po = self.get(order_id)
            if po.status == PurchaseOrderStatus.RECEIVED:
                raise InvalidStateError("Cannot delete a received purchase order", po.status.value)
            self._db.delete(po)
            self._audit("delete", "purchase_order", order_id, status=po.status.value)
        logger.info("Purchase order %s deleted", order_id)

    # ========================================================================
    # Private Helpers
    # ========================================================================

    def _ensure_products_exist(self, product_ids: list[int]) -> None:
        wanted = set(product_ids)
        found = set(self._db.scalars(select(Product.id).where(Product.id.in_(wanted))))
        missing = sorted(wanted - found)
        if missing:
            raise ValidationFailedError("One or more products not found", {"product_ids": missing})

    def _resolve_receiving_stock_id(self, product: Product, location: Location | None) -> int:
        if location is not None:
            return self._stock_service.stock_id_at_location(product.id, location)

        first_stock_id = self._db.scalar(
            select(Stock.id).where(Stock.product_id == product.id).order_by(Stock.id).limit(1)
        )
        if first_stock_id is not None:
            return first_stock_id

        fallback = self._db.scalar(
            select(Location)
            .where(Location.warehouse_id == product.warehouse_id)
            .order_by(Location.id)
            .limit(1)
        )
        if fallback is None:
            raise ValidationFailedError(
                f"No location available to receive product {product.name}",
                {"product_id": product.id, "warehouse_id": product.warehouse_id},
            )
        return self._stock_service.stock_id_at_location(product.id, fallback)

