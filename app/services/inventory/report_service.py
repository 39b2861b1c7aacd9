"""
Inventory Report Service.

Read-only aggregates over stock, movements and orders. Valuation uses the
product's cost (``unit_price``).
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.models.inventory_models import (
    PurchaseOrder,
    PurchaseOrderStatus,
    SalesOrder,
    SalesOrderItem,
    SalesOrderStatus,
    Stock,
    StockMovement,
    Warehouse,
)
from app.models.inventory_schemas import (
    InventoryValueReport,
    LowStockItem,
    LowStockReport,
    MovementReportItem,
    MovementTypeSummary,
    ProductSales,
    PurchaseReport,
    SalesReport,
    StockMovementReport,
    SupplierPurchases,
    WarehouseUtilization,
    WarehouseValue,
)

from .base import BaseInventoryService, ensure_date_range

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_CENT)


class ReportService(BaseInventoryService):
    """Service for inventory reports."""

    def inventory_value(self) -> InventoryValueReport:
        warehouses = self._db.scalars(
            select(Warehouse)
            .options(selectinload(Warehouse.stocks).selectinload(Stock.product))
            .order_by(Warehouse.id)
        ).all()

        by_warehouse = []
        total = Decimal(0)
        for warehouse in warehouses:
            value = sum(
                (stock.quantity * Decimal(stock.product.unit_price) for stock in warehouse.stocks),
                Decimal(0),
            )
            total += value
            by_warehouse.append(
                WarehouseValue(warehouse_id=warehouse.id, warehouse_name=warehouse.name, total_value=_money(value))
            )
        return InventoryValueReport(total_value=_money(total), value_by_warehouse=by_warehouse)

    def low_stock(self, threshold: int) -> LowStockReport:
        stocks = self._db.scalars(
            select(Stock)
            .where(Stock.quantity <= threshold)
            .options(
                selectinload(Stock.product),
                selectinload(Stock.warehouse),
                selectinload(Stock.location),
            )
            .order_by(Stock.quantity, Stock.id)
        ).all()
        items = [
            LowStockItem(
                stock_id=stock.id,
                product_id=stock.product_id,
                product_name=stock.product.name,
                sku=stock.product.sku,
                warehouse_id=stock.warehouse_id,
                warehouse_name=stock.warehouse.name,
                location_id=stock.location_id,
                location_name=stock.location.name,
                quantity=stock.quantity,
            )
            for stock in stocks
        ]
        return LowStockReport(threshold=threshold, items=items)

    def stock_movements(self, start_date: dt.datetime, end_date: dt.datetime) -> StockMovementReport:
        start_date, end_date = ensure_date_range(start_date, end_date)
        movements = self._db.scalars(
            select(StockMovement)
            .where(StockMovement.created_at >= start_date, StockMovement.created_at <= end_date)
            .options(selectinload(StockMovement.stock).selectinload(Stock.product))
            .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        ).all()

        summary: dict[str, MovementTypeSummary] = {}
        items = []
        for movement in movements:
            key = movement.movement_type.value
            bucket = summary.setdefault(key, MovementTypeSummary())
            bucket.count += 1
            bucket.total_quantity += movement.quantity
            items.append(
                MovementReportItem(
                    id=movement.id,
                    stock_id=movement.stock_id,
                    movement_type=movement.movement_type,
                    quantity=movement.quantity,
                    reason=movement.reason,
                    reference_type=movement.reference_type,
                    reference_id=movement.reference_id,
                    created_by_id=movement.created_by_id,
                    created_at=movement.created_at,
                    product_id=movement.stock.product_id,
                    product_name=movement.stock.product.name,
                )
            )
        return StockMovementReport(movements=items, summary=summary)

    def sales(self, start_date: dt.datetime, end_date: dt.datetime) -> SalesReport:
        start_date, end_date = ensure_date_range(start_date, end_date)
        orders = self._db.scalars(
            select(SalesOrder)
            .where(
                SalesOrder.created_at >= start_date,
                SalesOrder.created_at <= end_date,
                SalesOrder.status != SalesOrderStatus.CANCELLED,
            )
            .options(selectinload(SalesOrder.items).selectinload(SalesOrderItem.product))
        ).all()

        per_product: dict[int, ProductSales] = {}
        total = Decimal(0)
        for order in orders:
            for item in order.items:
                entry = per_product.setdefault(
                    item.product_id,
                    ProductSales(
                        product_id=item.product_id,
                        product_name=item.product.name,
                        quantity=0,
                        revenue=Decimal(0),
                    ),
                )
                entry.quantity += item.quantity
                entry.revenue += item.line_total
                total += item.line_total

        for entry in per_product.values():
            entry.revenue = _money(entry.revenue)
        return SalesReport(
            total_sales=_money(total),
            sales_by_product=sorted(per_product.values(), key=lambda e: e.product_id),
            order_count=len(orders),
        )

    def purchases(self, start_date: dt.datetime, end_date: dt.datetime) -> PurchaseReport:
        start_date, end_date = ensure_date_range(start_date, end_date)
        orders = self._db.scalars(
            select(PurchaseOrder)
            .where(
                PurchaseOrder.created_at >= start_date,
                PurchaseOrder.created_at <= end_date,
                PurchaseOrder.status != PurchaseOrderStatus.CANCELLED,
            )
            .options(selectinload(PurchaseOrder.items), selectinload(PurchaseOrder.supplier))
        ).all()

        per_supplier: dict[int, SupplierPurchases] = {}
        total = Decimal(0)
        for order in orders:
            entry = per_supplier.setdefault(
                order.supplier_id,
                SupplierPurchases(
                    supplier_id=order.supplier_id,
                    supplier_name=order.supplier.name,
                    order_count=0,
                    total_amount=Decimal(0),
                ),
            )
            entry.order_count += 1
            entry.total_amount += order.total_amount
            total += order.total_amount

        for entry in per_supplier.values():
            entry.total_amount = _money(entry.total_amount)
        return PurchaseReport(
            total_purchases=_money(total),
            purchases_by_supplier=sorted(per_supplier.values(), key=lambda e: e.supplier_id),
            order_count=len(orders),
        )

    def warehouse_utilization(self) -> list[WarehouseUtilization]:
        warehouses = self._db.scalars(
            select(Warehouse)
            .options(selectinload(Warehouse.stocks), selectinload(Warehouse.locations))
            .order_by(Warehouse.id)
        ).all()
        return [
            WarehouseUtilization(
                warehouse_id=warehouse.id,
                warehouse_name=warehouse.name,
                capacity=warehouse.capacity,
                total_items=warehouse.total_items,
                utilization_rate=round(warehouse.total_items / warehouse.capacity * 100, 2),
                location_count=len(warehouse.locations),
            )
            for warehouse in warehouses
        ]
