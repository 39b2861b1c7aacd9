"""
Sales Order Service.

Creating an order draws its items from stock; cancelling it puts back exactly
what was drawn, using the OUT movements recorded against the order.
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app import metrics
from app.core.exceptions import (
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from app.models.inventory_models import (
    Product,
    SalesOrder,
    SalesOrderItem,
    SalesOrderStatus,
    StockMovement,
    StockMovementType,
)
from app.models.inventory_schemas import SalesOrderCreate, SalesOrderStats, SalesOrderUpdate

from .base import BaseInventoryService, as_utc, ensure_date_range
from .stock_service import StockService

logger = logging.getLogger(__name__)

SALES_ORDER_REFERENCE = "sales_order"
_CENT = Decimal("0.01")


class SalesOrderService(BaseInventoryService):
    """Service for sales order operations."""

    def __init__(self, db: Session, user_id: int | None):
        super().__init__(db, user_id)
        self._stock_service: StockService | None = None

    def set_stock_service(self, stock_service: StockService) -> None:
        self._stock_service = stock_service

    def _require_stock_service(self) -> StockService:
        if self._stock_service is None:
            raise RuntimeError("Stock service not configured for SalesOrderService")
        return self._stock_service

    def create(self, data: SalesOrderCreate) -> SalesOrder:
        """
        Place an order and draw its items from stock.

        Availability is checked against each product's total stock across all
        locations while its rows are locked, then drawn from rows in id order.
        """
        stock_service = self._require_stock_service()

        with self._atomic():
            product_ids = [item.product_id for item in data.items]
            products = {
                p.id: p for p in self._db.scalars(select(Product).where(Product.id.in_(product_ids)))
            }
            missing = sorted(set(product_ids) - products.keys())
            if missing:
                raise ValidationFailedError("One or more products not found", {"product_ids": missing})

            stocks_by_product = self._lock_product_stocks(product_ids)

            shortfalls = []
            for item in data.items:
                available = sum(stock.quantity for stock in stocks_by_product[item.product_id])
                if available < item.quantity:
                    shortfalls.append(
                        {
                            "product_id": item.product_id,
                            "name": products[item.product_id].name,
                            "requested": item.quantity,
                            "available": available,
                        }
                    )
            if shortfalls:
                listing = ", ".join(
                    f"{s['name']} (requested: {s['requested']}, available: {s['available']})" for s in shortfalls
                )
                raise InsufficientStockError(
                    f"Insufficient stock for items: {listing}",
                    {"items": shortfalls},
                )

            order = SalesOrder(
                customer_id=data.customer_id,
                status=SalesOrderStatus.OPEN,
                created_by_id=self._user_id,
            )
            for item in data.items:
                order.items.append(
                    SalesOrderItem(product_id=item.product_id, quantity=item.quantity, unit_price=item.unit_price)
                )
            self._db.add(order)
            self._db.flush()

            reason = f"Sales Order #{order.id}"
            for item in data.items:
                remaining = item.quantity
                for stock in stocks_by_product[item.product_id]:
                    if remaining == 0:
                        break
                    take = min(stock.quantity, remaining)
                    if take <= 0:
                        continue
                    stock_service.apply_movement(
                        stock,
                        StockMovementType.OUT,
                        take,
                        reason,
                        reference_type=SALES_ORDER_REFERENCE,
                        reference_id=order.id,
                    )
                    remaining -= take

            self._audit(
                "create", "sales_order", order.id,
                customer_id=order.customer_id,
                items=[{"product_id": i.product_id, "quantity": i.quantity} for i in data.items],
                total_amount=order.total_amount,
            )

        metrics.sales_order_created()
        logger.info("Created sales order %s for customer %s, total %s", order.id, order.customer_id, order.total_amount)
        return order

    def get(self, order_id: int) -> SalesOrder:
        order = self._db.scalar(
            select(SalesOrder)
            .where(SalesOrder.id == order_id)
            .options(selectinload(SalesOrder.items).selectinload(SalesOrderItem.product))
        )
        if order is None:
            raise NotFoundError("Sales order", order_id)
        return order

    def list(
        self,
        customer_id: int | None = None,
        status: SalesOrderStatus | None = None,
        start_date: dt.datetime | None = None,
        end_date: dt.datetime | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[Sequence[SalesOrder], int]:
        start_date, end_date = as_utc(start_date), as_utc(end_date)
        stmt = select(SalesOrder)
        if customer_id:
            stmt = stmt.where(SalesOrder.customer_id == customer_id)
        if status:
            stmt = stmt.where(SalesOrder.status == status)
        if start_date:
            stmt = stmt.where(SalesOrder.created_at >= start_date)
        if end_date:
            stmt = stmt.where(SalesOrder.created_at <= end_date)

        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        orders = self._db.scalars(
            stmt.options(selectinload(SalesOrder.items).selectinload(SalesOrderItem.product))
            .order_by(SalesOrder.created_at.desc(), SalesOrder.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        return orders, total

    def update(self, order_id: int, data: SalesOrderUpdate) -> SalesOrder:
        """Change status. Moving to ``cancelled`` runs the full cancellation."""
        with self._atomic():
            order = self.get(order_id)
            if order.status == SalesOrderStatus.COMPLETED:
                raise InvalidStateError("Cannot update a completed sales order", order.status.value)
            if order.status == SalesOrderStatus.CANCELLED:
                raise InvalidStateError("Cannot update a cancelled sales order", order.status.value)

            previous = order.status
            if data.status == SalesOrderStatus.CANCELLED:
                self._cancel(order)
            else:
                order.status = data.status
                self._audit(
                    "update", "sales_order", order.id,
                    status_from=previous.value, status_to=order.status.value,
                )

        if data.status == SalesOrderStatus.CANCELLED:
            metrics.sales_order_cancelled()
        logger.info("Sales order %s updated: %s -> %s", order.id, previous.value, order.status.value)
        return order

    def cancel(self, order_id: int) -> SalesOrder:
        with self._atomic():
            order = self.get(order_id)
            if order.status == SalesOrderStatus.CANCELLED:
                raise InvalidStateError("Sales order is already cancelled", order.status.value)
            if order.status == SalesOrderStatus.COMPLETED:
                raise InvalidStateError("Cannot cancel a completed sales order", order.status.value)
            self._cancel(order)

        metrics.sales_order_cancelled()
        logger.info("Sales order %s cancelled, stock restored", order.id)
        return order

    def _cancel(self, order: SalesOrder) -> None:
        """Return every drawn quantity to the row it came from. Caller owns the transaction."""
        stock_service = self._require_stock_service()
        drawn = self._db.scalars(
            select(StockMovement)
            .where(
                StockMovement.reference_type == SALES_ORDER_REFERENCE,
                StockMovement.reference_id == order.id,
                StockMovement.movement_type == StockMovementType.OUT,
            )
            .order_by(StockMovement.id)
        ).all()

        locked = self._lock_stocks(m.stock_id for m in drawn)
        reason = f"Sales Order #{order.id} cancelled"
        for movement in drawn:
            stock_service.apply_movement(
                locked[movement.stock_id],
                StockMovementType.IN,
                movement.quantity,
                reason,
                reference_type=SALES_ORDER_REFERENCE,
                reference_id=order.id,
            )

        order.status = SalesOrderStatus.CANCELLED
        self._audit(
            "cancel", "sales_order", order.id,
            restored=[{"stock_id": m.stock_id, "quantity": m.quantity} for m in drawn],
        )

    def stats(self, start_date: dt.datetime, end_date: dt.datetime) -> SalesOrderStats:
        """
        Order statistics for orders created in the window. Revenue and the
        average order value ignore cancelled orders.
        """
        start_date, end_date = ensure_date_range(start_date, end_date)

        orders = self._db.scalars(
            select(SalesOrder)
            .where(SalesOrder.created_at >= start_date, SalesOrder.created_at <= end_date)
            .options(selectinload(SalesOrder.items))
        ).all()

        by_status: dict[str, int] = {}
        revenue = Decimal(0)
        billable = 0
        for order in orders:
            by_status[order.status.value] = by_status.get(order.status.value, 0) + 1
            if order.status != SalesOrderStatus.CANCELLED:
                revenue += order.total_amount
                billable += 1

        average = (revenue / billable).quantize(_CENT) if billable else Decimal("0.00")
        return SalesOrderStats(
            order_count=len(orders),
            orders_by_status=by_status,
            total_revenue=revenue.quantize(_CENT),
            average_order_value=average,
        )
