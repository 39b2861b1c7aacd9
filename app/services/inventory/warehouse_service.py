"""
Warehouse Service - warehouses and the locations inside them.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError
from app.models.inventory_models import Location, Product, Stock, Warehouse
from app.models.inventory_schemas import LocationCreate, WarehouseCreate, WarehouseUpdate
from app.services.inventory.base import BaseInventoryService

logger = logging.getLogger(__name__)


class WarehouseService(BaseInventoryService):
    """Service for warehouse and location operations."""

    def create(self, data: WarehouseCreate) -> Warehouse:
        with self._atomic():
            warehouse = Warehouse(**data.model_dump())
            self._db.add(warehouse)
            self._db.flush()
            self._audit("create", "warehouse", warehouse.id, name=warehouse.name, capacity=warehouse.capacity)
        logger.info("Created warehouse: %s (id=%s)", warehouse.name, warehouse.id)
        return warehouse

    def get(self, warehouse_id: int) -> Warehouse:
        return self._get_or_404(Warehouse, warehouse_id)

    def list(self, page: int = 1, page_size: int = 10) -> tuple[Sequence[Warehouse], int]:
        total = self._db.scalar(select(func.count(Warehouse.id))) or 0
        warehouses = self._db.scalars(
            select(Warehouse)
            .options(selectinload(Warehouse.locations))
            .order_by(Warehouse.name, Warehouse.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        return warehouses, total

    def update(self, warehouse_id: int, data: WarehouseUpdate) -> Warehouse:
        with self._atomic():
            warehouse = self.get(warehouse_id)
            update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
            for key, value in update_data.items():
                setattr(warehouse, key, value)
            self._audit("update", "warehouse", warehouse.id, changes=update_data)
        logger.info("Updated warehouse: %s (id=%s)", warehouse.name, warehouse.id)
        return warehouse

    def delete(self, warehouse_id: int) -> None:
        """Delete a warehouse with no products or stock. Its locations go with it."""
        with self._atomic():
            warehouse = self.get(warehouse_id)
            product_count, stock_count = self.counts(warehouse.id)
            if product_count or stock_count:
                raise ConflictError(
                    "Cannot delete warehouse with associated products or stock",
                    {"product_count": product_count, "stock_count": stock_count},
                )
            location_ids = [location.id for location in warehouse.locations]
            self._db.delete(warehouse)
            self._audit("delete", "warehouse", warehouse_id, name=warehouse.name, location_ids=location_ids)
        logger.info("Deleted warehouse: %s (id=%s)", warehouse.name, warehouse_id)

    def add_location(self, warehouse_id: int, data: LocationCreate) -> Location:
        with self._atomic():
            warehouse = self.get(warehouse_id)
            location = Location(name=data.name)
            warehouse.locations.append(location)
            self._db.flush()
            self._audit("create", "location", location.id, name=location.name, warehouse_id=warehouse.id)
        logger.info("Added location %s to warehouse %s", location.name, warehouse_id)
        return location

    def delete_location(self, location_id: int) -> None:
        with self._atomic():
            location = self._get_or_404(Location, location_id)
            stock_count = self._db.scalar(
                select(func.count(Stock.id)).where(Stock.location_id == location.id)
            )
            if stock_count:
                raise ConflictError(
                    "Cannot delete location with existing stock",
                    {"stock_count": stock_count},
                )
            warehouse = location.warehouse
            warehouse_id = warehouse.id
            warehouse.locations.remove(location)
            self._audit("delete", "location", location_id, name=location.name, warehouse_id=warehouse_id)
        logger.info("Deleted location %s from warehouse %s", location_id, warehouse_id)

    def counts(self, warehouse_id: int) -> tuple[int, int]:
        """(product_count, stock_count) for a warehouse."""
        product_count = self._db.scalar(
            select(func.count(Product.id)).where(Product.warehouse_id == warehouse_id)
        ) or 0
        stock_count = self._db.scalar(
            select(func.count(Stock.id)).where(Stock.warehouse_id == warehouse_id)
        ) or 0
        return product_count, stock_count
