"""
Pydantic schemas for Inventory API.

Request models validate input before it reaches the services; response models
read straight from ORM objects (``from_attributes``).
"""
from __future__ import annotations

import datetime as dt
import json
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.models.inventory_models import (
    AdjustmentType,
    PurchaseOrderStatus,
    SalesOrderStatus,
    StockMovementType,
)


class _UpdateModel(BaseModel):
    """Partial update: at least one field must be supplied."""

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


# ============================================================================
# Category Schemas
# ============================================================================

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class CategoryUpdate(_UpdateModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class CategoryRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CategoryOut(CategoryRef):
    description: str | None = None
    product_count: int = 0


# ============================================================================
# Supplier Schemas
# ============================================================================

class SupplierCreate(BaseModel):
    """Schema for creating a supplier."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    contact_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=32)
    address: str | None = None


class SupplierUpdate(_UpdateModel):
    """Schema for updating a supplier."""
    name: str | None = Field(None, min_length=1, max_length=200)
    email: EmailStr | None = None
    contact_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=32)
    address: str | None = None


class SupplierRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class SupplierOut(SupplierRef):
    """Schema for supplier API response."""
    contact_name: str | None = None
    phone: str | None = None
    address: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    product_count: int = 0
    purchase_order_count: int = 0


class SupplierStats(BaseModel):
    total_orders: int = 0
    total_products: int = 0
    total_spent: Decimal = Decimal("0")
    orders_by_status: dict[str, int] = Field(default_factory=dict)


# ============================================================================
# Warehouse / Location Schemas
# ============================================================================

class WarehouseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    capacity: int = Field(..., ge=1)
    address: str = Field(..., min_length=1)


class WarehouseUpdate(_UpdateModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    capacity: int | None = Field(None, ge=1)
    address: str | None = Field(None, min_length=1)


class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    warehouse_id: int


class WarehouseRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class WarehouseOut(WarehouseRef):
    capacity: int
    address: str
    created_at: dt.datetime | None = None
    locations: list[LocationOut] = Field(default_factory=list)
    stock_count: int = 0
    product_count: int = 0


# ============================================================================
# Stock Schemas
# ============================================================================

class ProductRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sku: str


class StockMovementCreate(BaseModel):
    movement_type: StockMovementType
    quantity: int = Field(..., ge=1)
    reason: str = Field(..., min_length=1, max_length=500)


class StockMovementOut(BaseModel):
    """Schema for stock movement API response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_id: int
    movement_type: StockMovementType
    quantity: int
    reason: str
    reference_type: str | None = None
    reference_id: int | None = None
    created_by_id: int | None = None
    created_at: dt.datetime


class StockAdjustmentCreate(BaseModel):
    """Schema for manual stock adjustment."""
    adjustment_type: AdjustmentType
    quantity: int = Field(..., ge=1)
    reason: str = Field(..., min_length=1, max_length=500)


class StockAdjustmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_id: int
    adjustment_type: AdjustmentType
    quantity: int
    reason: str
    approved_by_id: int
    created_at: dt.datetime


class StockCreate(BaseModel):
    product_id: int
    warehouse_id: int
    location_id: int
    quantity: int = Field(0, ge=0)


class StockTransferCreate(BaseModel):
    target_location_id: int
    quantity: int = Field(..., ge=1)
    reason: str = Field(..., min_length=1, max_length=400)


class StockSummaryOut(BaseModel):
    """Stock row as embedded in product and location responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    warehouse_id: int
    location_id: int
    quantity: int
    updated_at: dt.datetime | None = None


class StockOut(StockSummaryOut):
    created_at: dt.datetime | None = None
    product: ProductRef
    warehouse: WarehouseRef
    location: LocationOut


class StockDetailOut(StockOut):
    movements: list[StockMovementOut] = Field(default_factory=list)
    adjustments: list[StockAdjustmentOut] = Field(default_factory=list)


class StockWithMovementsOut(StockSummaryOut):
    location: LocationOut
    recent_movements: list[StockMovementOut] = Field(default_factory=list)


class StockTransferOut(BaseModel):
    source_stock: StockOut
    target_stock: StockOut


class LocationWithStockOut(LocationOut):
    stocks: list[StockSummaryOut] = Field(default_factory=list)


class WarehouseDetailOut(WarehouseOut):
    locations: list[LocationWithStockOut] = Field(default_factory=list)


# ============================================================================
# Product Schemas
# ============================================================================

class ProductCreate(BaseModel):
    """Schema for creating a product."""
    name: str = Field(..., min_length=1, max_length=200)
    sku: str = Field(..., min_length=1, max_length=50)
    barcode: str = Field(..., min_length=1, max_length=50)
    description: str | None = None
    category_id: int
    supplier_id: int
    warehouse_id: int

    # Cost price (valuation) and selling price
    unit_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)


class ProductUpdate(_UpdateModel):
    """Schema for updating a product."""
    name: str | None = Field(None, min_length=1, max_length=200)
    sku: str | None = Field(None, min_length=1, max_length=50)
    barcode: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = None
    category_id: int | None = None
    supplier_id: int | None = None
    warehouse_id: int | None = None
    unit_price: Decimal | None = Field(None, ge=0, max_digits=15, decimal_places=2)
    price: Decimal | None = Field(None, ge=0, max_digits=15, decimal_places=2)


class ProductOut(BaseModel):
    """Schema for product API response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sku: str
    barcode: str
    description: str | None = None

    category_id: int
    supplier_id: int
    warehouse_id: int
    category: CategoryRef
    supplier: SupplierRef
    warehouse: WarehouseRef

    unit_price: Decimal
    price: Decimal

    # Computed fields
    total_quantity: int = 0
    profit_margin: Decimal | None = None
    stocks: list[StockSummaryOut] = Field(default_factory=list)

    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class ProductDetailOut(ProductOut):
    stocks: list[StockWithMovementsOut] = Field(default_factory=list)


class ProductStockOut(BaseModel):
    product_id: int
    total_quantity: int
    stocks: list[StockOut]


class SupplierDetailOut(SupplierOut):
    products: list[ProductRef] = Field(default_factory=list)
    recent_purchase_orders: list[PurchaseOrderSummaryOut] = Field(default_factory=list)


# ============================================================================
# Purchase Order Schemas
# ============================================================================

class OrderItemIn(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)


class PurchaseOrderCreate(BaseModel):
    supplier_id: int
    items: list[OrderItemIn] = Field(..., min_length=1)
    notes: str | None = None


class PurchaseOrderUpdate(BaseModel):
    status: PurchaseOrderStatus
    notes: str | None = None


class PurchaseOrderReceive(BaseModel):
    location_id: int | None = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product: ProductRef
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class PurchaseOrderSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    supplier_id: int
    status: PurchaseOrderStatus
    total_amount: Decimal
    created_at: dt.datetime
    received_at: dt.datetime | None = None


class PurchaseOrderOut(PurchaseOrderSummaryOut):
    supplier: SupplierRef
    notes: str | None = None
    items: list[OrderItemOut] = Field(default_factory=list)


# ============================================================================
# Sales Order Schemas
# ============================================================================

class SalesOrderCreate(BaseModel):
    customer_id: int = Field(..., ge=1)
    items: list[OrderItemIn] = Field(..., min_length=1)

    @field_validator("items")
    @classmethod
    def unique_products(cls, v: list[OrderItemIn]) -> list[OrderItemIn]:
        product_ids = [item.product_id for item in v]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Each product may appear only once per order")
        return v


class SalesOrderUpdate(BaseModel):
    status: SalesOrderStatus


class SalesOrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    status: SalesOrderStatus
    created_by_id: int | None = None
    total_amount: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime | None = None
    items: list[OrderItemOut] = Field(default_factory=list)


class SalesOrderStats(BaseModel):
    order_count: int = 0
    orders_by_status: dict[str, int] = Field(default_factory=dict)
    total_revenue: Decimal = Decimal("0")
    average_order_value: Decimal = Decimal("0")


# ============================================================================
# Report Schemas
# ============================================================================

class WarehouseValue(BaseModel):
    warehouse_id: int
    warehouse_name: str
    total_value: Decimal


class InventoryValueReport(BaseModel):
    total_value: Decimal = Decimal("0")
    value_by_warehouse: list[WarehouseValue] = Field(default_factory=list)


class LowStockItem(BaseModel):
    stock_id: int
    product_id: int
    product_name: str
    sku: str
    warehouse_id: int
    warehouse_name: str
    location_id: int
    location_name: str
    quantity: int


class LowStockReport(BaseModel):
    threshold: int
    items: list[LowStockItem] = Field(default_factory=list)


class MovementTypeSummary(BaseModel):
    count: int = 0
    total_quantity: int = 0


class MovementReportItem(StockMovementOut):
    product_id: int
    product_name: str


class StockMovementReport(BaseModel):
    movements: list[MovementReportItem] = Field(default_factory=list)
    summary: dict[str, MovementTypeSummary] = Field(default_factory=dict)


class ProductSales(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    revenue: Decimal


class SalesReport(BaseModel):
    total_sales: Decimal = Decimal("0")
    sales_by_product: list[ProductSales] = Field(default_factory=list)
    order_count: int = 0


class SupplierPurchases(BaseModel):
    supplier_id: int
    supplier_name: str
    order_count: int
    total_amount: Decimal


class PurchaseReport(BaseModel):
    total_purchases: Decimal = Decimal("0")
    purchases_by_supplier: list[SupplierPurchases] = Field(default_factory=list)
    order_count: int = 0


class WarehouseUtilization(BaseModel):
    warehouse_id: int
    warehouse_name: str
    capacity: int
    total_items: int
    utilization_rate: float
    location_count: int


# ============================================================================
# Audit Schemas
# ============================================================================

class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    action: str
    entity: str
    entity_id: int
    user_id: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: dt.datetime

    @field_validator("details", mode="before")
    @classmethod
    def parse_details(cls, v: Any) -> Any:
        if isinstance(v, str):
            return json.loads(v) if v else {}
        return v


class AuditSummary(BaseModel):
    total: int = 0
    summary: dict[str, int] = Field(default_factory=dict)


SupplierDetailOut.model_rebuild()
