"""
Stock Service.

Handles stock rows and every change to their quantities: movements,
adjustments and transfers between locations. Each public mutation is one
transaction; ``apply_movement`` is the building block the order services use
inside their own transactions.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from app import metrics
from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.models.inventory_models import (
    AdjustmentType,
    Location,
    Product,
    Stock,
    StockAdjustment,
    StockMovement,
    StockMovementType,
    Warehouse,
)
from app.models.inventory_schemas import (
    StockAdjustmentCreate,
    StockCreate,
    StockMovementCreate,
    StockTransferCreate,
)
from app.services.inventory.base import BaseInventoryService

logger = logging.getLogger(__name__)


class StockService(BaseInventoryService):
    """Service for stock rows and stock movements."""

    # ========================================================================
    # Stock rows
    # ========================================================================

    def get_stock(self, stock_id: int) -> Stock:
        return self._get_or_404(Stock, stock_id)

    def list_stock(
        self,
        product_id: int | None = None,
        warehouse_id: int | None = None,
        location_id: int | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[Sequence[Stock], int]:
        stmt = select(Stock)
        if product_id:
            stmt = stmt.where(Stock.product_id == product_id)
        if warehouse_id:
            stmt = stmt.where(Stock.warehouse_id == warehouse_id)
        if location_id:
            stmt = stmt.where(Stock.location_id == location_id)

        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        stocks = self._db.scalars(
            stmt.options(
                selectinload(Stock.product),
                selectinload(Stock.warehouse),
                selectinload(Stock.location),
            )
            .order_by(Stock.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        return stocks, total

    def create_stock(self, data: StockCreate) -> Stock:
        with self._atomic():
            if self._db.get(Product, data.product_id) is None:
                raise ValidationFailedError(
                    f"Product with ID {data.product_id} not found", {"product_id": data.product_id}
                )
            if self._db.get(Warehouse, data.warehouse_id) is None:
                raise ValidationFailedError(
                    f"Warehouse with ID {data.warehouse_id} not found", {"warehouse_id": data.warehouse_id}
                )
            location = self._db.get(Location, data.location_id)
            if location is None or location.warehouse_id != data.warehouse_id:
                raise ValidationFailedError(
                    "Location does not belong to the specified warehouse",
                    {"location_id": data.location_id, "warehouse_id": data.warehouse_id},
                )
            self._ensure_no_stock_row(data.product_id, data.location_id)

            stock = Stock(**data.model_dump())
            self._db.add(stock)
            self._db.flush()
            self._audit(
                "create", "stock", stock.id,
                product_id=stock.product_id, location_id=stock.location_id, quantity=stock.quantity,
            )
        logger.info("Created stock row %s for product %s at location %s", stock.id, stock.product_id, stock.location_id)
        return stock

    def _ensure_no_stock_row(self, product_id: int, location_id: int) -> None:
        existing = self._db.scalar(
            select(Stock.id).where(Stock.product_id == product_id, Stock.location_id == location_id)
        )
        if existing is not None:
            raise ConflictError(
                "Stock already exists for this product at this location",
                {"stock_id": existing},
            )

    def stock_id_at_location(self, product_id: int, location: Location) -> int:
        """Id of the product's stock row at a location, creating an empty row if missing. Not locked."""
        stock_id = self._db.scalar(
            select(Stock.id).where(Stock.product_id == product_id, Stock.location_id == location.id)
        )
        if stock_id is not None:
            return stock_id
        stock = Stock(
            product_id=product_id,
            warehouse_id=location.warehouse_id,
            location_id=location.id,
            quantity=0,
        )
        self._db.add(stock)
        self._db.flush()
        self._audit("create", "stock", stock.id, product_id=product_id, location_id=location.id, quantity=0)
        return stock.id

    # ========================================================================
    # Movements
    # ========================================================================

    def apply_movement(
        self,
        stock: Stock,
        movement_type: StockMovementType,
        quantity: int,
        reason: str,
        reference_type: str | None = None,
        reference_id: int | None = None,
    ) -> StockMovement:
        """
        Change a (locked) stock row and record the movement.

        Runs inside the caller's transaction; raises InsufficientStockError when
        an OUT movement exceeds the row's quantity.
        """
        delta = quantity if movement_type == StockMovementType.IN else -quantity
        stock.apply_delta(delta)
        movement = StockMovement(
            stock_id=stock.id,
            movement_type=movement_type,
            quantity=quantity,
            reason=reason,
            reference_type=reference_type,
            reference_id=reference_id,
            created_by_id=self._user_id,
        )
        self._db.add(movement)
        return movement

    def record_movement(self, stock_id: int, data: StockMovementCreate) -> StockMovement:
        with self._atomic():
            stock = self._lock_stock(stock_id)
            if stock is None:
                raise NotFoundError("Stock", stock_id)
            quantity_before = stock.quantity
            movement = self.apply_movement(stock, data.movement_type, data.quantity, data.reason)
            self._db.flush()
            self._audit(
                "movement", "stock", stock.id,
                movement_id=movement.id,
                movement_type=data.movement_type.value,
                quantity=data.quantity,
                quantity_before=quantity_before,
                quantity_after=stock.quantity,
            )
        metrics.stock_movement_recorded(data.movement_type.value)
        logger.info(
            "Stock %s %s %s: %s -> %s",
            stock.id, data.movement_type.value, data.quantity, quantity_before, stock.quantity,
        )
        return movement

    def list_movements(
        self,
        stock_id: int,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[Sequence[StockMovement], int]:
        self.get_stock(stock_id)
        stmt = select(StockMovement).where(StockMovement.stock_id == stock_id)
        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        movements = self._db.scalars(
            stmt.order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        return movements, total

    def recent_movements(self, stock_id: int, limit: int = 10) -> Sequence[StockMovement]:
        return self._db.scalars(
            select(StockMovement)
            .where(StockMovement.stock_id == stock_id)
            .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
            .limit(limit)
        ).all()

    # ========================================================================
    # Adjustments
    # ========================================================================

    def adjust_stock(self, stock_id: int, data: StockAdjustmentCreate) -> StockAdjustment:
        """Manual correction approved by the acting user."""
        with self._atomic():
            stock = self._lock_stock(stock_id)
            if stock is None:
                raise NotFoundError("Stock", stock_id)
            quantity_before = stock.quantity
            delta = data.quantity if data.adjustment_type == AdjustmentType.ADD else -data.quantity
            stock.apply_delta(delta)

            adjustment = StockAdjustment(
                stock_id=stock.id,
                adjustment_type=data.adjustment_type,
                quantity=data.quantity,
                reason=data.reason,
                approved_by_id=self._user_id,
            )
            self._db.add(adjustment)
            self._db.flush()
            self._audit(
                "adjustment", "stock", stock.id,
                adjustment_id=adjustment.id,
                adjustment_type=data.adjustment_type.value,
                quantity=data.quantity,
                quantity_before=quantity_before,
                quantity_after=stock.quantity,
            )
        metrics.stock_adjusted(data.adjustment_type.value)
        logger.info(
            "Stock %s adjusted (%s %s): %s -> %s",
            stock.id, data.adjustment_type.value, data.quantity, quantity_before, stock.quantity,
        )
        return adjustment

    # ========================================================================
    # Transfers
    # ========================================================================

    def transfer_stock(self, source_stock_id: int, data: StockTransferCreate) -> tuple[Stock, Stock]:
        """
        Move quantity from one stock row to the same product's row at another
        location, creating the target row when needed.
        """
        with self._atomic():
            source = self._db.get(Stock, source_stock_id)
            if source is None:
                raise NotFoundError("Source stock", source_stock_id)
            target_location = self._db.get(Location, data.target_location_id)
            if target_location is None:
                raise NotFoundError("Target location", data.target_location_id)
            if target_location.id == source.location_id:
                raise ValidationFailedError(
                    "Source and target locations cannot be the same",
                    {"location_id": target_location.id},
                )

            target_id = self.stock_id_at_location(source.product_id, target_location)
            # Both rows are locked together, lowest id first.
            locked = self._lock_stocks([source_stock_id, target_id])
            source, target = locked[source_stock_id], locked[target_id]

            self.apply_movement(
                source, StockMovementType.OUT, data.quantity,
                f"Transfer out: {data.reason}",
                reference_type="transfer", reference_id=target.id,
            )
            self.apply_movement(
                target, StockMovementType.IN, data.quantity,
                f"Transfer in: {data.reason}",
                reference_type="transfer", reference_id=source.id,
            )
            self._audit(
                "transfer", "stock", source.id,
                target_stock_id=target.id,
                target_location_id=target_location.id,
                quantity=data.quantity,
            )
        metrics.stock_transferred()
        logger.info(
            "Transferred %s of product %s from stock %s to stock %s",
            data.quantity, source.product_id, source.id, target.id,
        )
        return source, target
