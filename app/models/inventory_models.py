"""
Inventory models: catalogue, storage topology, stock levels, orders and the
stock audit trail.

Stock is held per (product, location) row. Every change to a row's quantity is
paired with a StockMovement or StockAdjustment record written in the same
transaction, so the history always explains the current level.
"""
from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.core.exceptions import InsufficientStockError
from app.db.base_class import Base
from app.models.models import utcnow

if TYPE_CHECKING:
    from app.models.models import User


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [e.value for e in enum_cls]


class StockMovementType(str, enum.Enum):
    """Direction of a stock movement."""
    IN = "IN"
    OUT = "OUT"


class AdjustmentType(str, enum.Enum):
    """Direction of a manual stock adjustment."""
    ADD = "ADD"
    REMOVE = "REMOVE"


class PurchaseOrderStatus(str, enum.Enum):
    OPEN = "open"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class SalesOrderStatus(str, enum.Enum):
    OPEN = "open"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Category(Base):
    """Product category."""
    __tablename__ = "category"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    products: Mapped[list[Product]] = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class Supplier(Base):
    """
    Supplier/Vendor for inventory purchases.

    Suppliers are identified by their email address, which must be unique.
    """
    __tablename__ = "supplier"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True,
    )

    products: Mapped[list[Product]] = relationship("Product", back_populates="supplier")
    purchase_orders: Mapped[list[PurchaseOrder]] = relationship(
        "PurchaseOrder",
        back_populates="supplier",
        order_by="PurchaseOrder.created_at.desc()",
    )

    def __repr__(self) -> str:
        return f"<Supplier(id={self.id}, name='{self.name}')>"


class Warehouse(Base):
    """A physical site with a nominal item capacity, subdivided into locations."""
    __tablename__ = "warehouse"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="capacity_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    locations: Mapped[list[Location]] = relationship(
        "Location",
        back_populates="warehouse",
        cascade="all, delete-orphan",
        order_by="Location.id",
    )
    products: Mapped[list[Product]] = relationship("Product", back_populates="warehouse")
    stocks: Mapped[list[Stock]] = relationship("Stock", back_populates="warehouse")

    def __repr__(self) -> str:
        return f"<Warehouse(id={self.id}, name='{self.name}')>"

    @property
    def total_items(self) -> int:
        return sum(stock.quantity for stock in self.stocks)


class Location(Base):
    """A bin/shelf/zone inside a warehouse."""
    __tablename__ = "location"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    warehouse_id: Mapped[int] = mapped_column(ForeignKey("warehouse.id"), nullable=False, index=True)

    warehouse: Mapped[Warehouse] = relationship("Warehouse", back_populates="locations")
    stocks: Mapped[list[Stock]] = relationship("Stock", back_populates="location")

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name='{self.name}', warehouse_id={self.warehouse_id})>"


class Product(Base):
    """
    Product in the catalogue.

    SKU and barcode are globally unique. ``unit_price`` is the cost price used
    for inventory valuation; ``price`` is the selling price.
    """
    __tablename__ = "product"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    sku: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    barcode: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    category_id: Mapped[int] = mapped_column(ForeignKey("category.id"), nullable=False, index=True)
    supplier_id: Mapped[int] = mapped_column(ForeignKey("supplier.id"), nullable=False, index=True)
    warehouse_id: Mapped[int] = mapped_column(ForeignKey("warehouse.id"), nullable=False, index=True)

    unit_price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True,
    )

    category: Mapped[Category] = relationship("Category", back_populates="products")
    supplier: Mapped[Supplier] = relationship("Supplier", back_populates="products")
    warehouse: Mapped[Warehouse] = relationship("Warehouse", back_populates="products")
    stocks: Mapped[list[Stock]] = relationship("Stock", back_populates="product", order_by="Stock.id")
    purchase_items: Mapped[list[PurchaseOrderItem]] = relationship("PurchaseOrderItem", back_populates="product")
    sales_items: Mapped[list[SalesOrderItem]] = relationship("SalesOrderItem", back_populates="product")

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, sku='{self.sku}', name='{self.name}')>"

    @property
    def total_quantity(self) -> int:
        """Units on hand across every location."""
        return sum(stock.quantity for stock in self.stocks)

    @property
    def profit_margin(self) -> Decimal | None:
        """Margin of selling price over cost, in percent."""
        if not self.unit_price:
            return None
        margin = ((self.price - self.unit_price) / self.unit_price) * 100
        return margin.quantize(Decimal("0.01"))


class Stock(Base):
    """Quantity of one product held at one location."""
    __tablename__ = "stock"
    __table_args__ = (
        UniqueConstraint("product_id", "location_id", name="uq_stock_product_location"),
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("product.id"), nullable=False, index=True)
    warehouse_id: Mapped[int] = mapped_column(ForeignKey("warehouse.id"), nullable=False, index=True)
    location_id: Mapped[int] = mapped_column(ForeignKey("location.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True,
    )

    product: Mapped[Product] = relationship("Product", back_populates="stocks")
    warehouse: Mapped[Warehouse] = relationship("Warehouse", back_populates="stocks")
    location: Mapped[Location] = relationship("Location", back_populates="stocks")
    movements: Mapped[list[StockMovement]] = relationship(
        "StockMovement",
        back_populates="stock",
        order_by="(StockMovement.created_at.desc(), StockMovement.id.desc())",
    )
    adjustments: Mapped[list[StockAdjustment]] = relationship(
        "StockAdjustment",
        back_populates="stock",
        order_by="(StockAdjustment.created_at.desc(), StockAdjustment.id.desc())",
    )

    def __repr__(self) -> str:
        return (
            f"<Stock(id={self.id}, product_id={self.product_id}, "
            f"location_id={self.location_id}, qty={self.quantity})>"
        )

    def apply_delta(self, quantity_change: int) -> None:
        """
        Change the on-hand quantity. Positive adds, negative removes.

        The caller records the matching StockMovement/StockAdjustment.
        """
        new_quantity = self.quantity + quantity_change
        if new_quantity < 0:
            raise InsufficientStockError(
                details={"stock_id": self.id, "available": self.quantity, "requested": -quantity_change},
            )
        self.quantity = new_quantity


class StockMovement(Base):
    """
    Immutable record of stock flowing into or out of a stock row.

    ``reference_type``/``reference_id`` point at the document that caused the
    movement (purchase order, sales order, transfer) when there is one.
    """
    __tablename__ = "stock_movement"
    __table_args__ = (
        Index("ix_stock_movement_stock_date", "stock_id", "created_at"),
        Index("ix_stock_movement_reference", "reference_type", "reference_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    stock_id: Mapped[int] = mapped_column(ForeignKey("stock.id"), nullable=False, index=True)
    movement_type: Mapped[StockMovementType] = mapped_column(
        Enum(StockMovementType, values_callable=_enum_values, native_enum=False, length=10),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("user.id"), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    stock: Mapped[Stock] = relationship("Stock", back_populates="movements")
    created_by: Mapped[User | None] = relationship("User")

    def __repr__(self) -> str:
        return (
            f"<StockMovement(id={self.id}, stock_id={self.stock_id}, "
            f"type={self.movement_type}, qty={self.quantity})>"
        )


class StockAdjustment(Base):
    """Manual correction of a stock row (damage, count correction), approved by a user."""
    __tablename__ = "stock_adjustment"

    id: Mapped[int] = mapped_column(primary_key=True)
    stock_id: Mapped[int] = mapped_column(ForeignKey("stock.id"), nullable=False, index=True)
    adjustment_type: Mapped[AdjustmentType] = mapped_column(
        Enum(AdjustmentType, values_callable=_enum_values, native_enum=False, length=10),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    approved_by_id: Mapped[int] = mapped_column(ForeignKey("user.id"), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    stock: Mapped[Stock] = relationship("Stock", back_populates="adjustments")
    approved_by: Mapped[User] = relationship("User")

    def __repr__(self) -> str:
        return (
            f"<StockAdjustment(id={self.id}, stock_id={self.stock_id}, "
            f"type={self.adjustment_type}, qty={self.quantity})>"
        )


class PurchaseOrder(Base):
    """Order placed with a supplier. Receiving it adds its items to stock."""
    __tablename__ = "purchase_order"
    __table_args__ = (
        Index("ix_purchase_order_supplier_status", "supplier_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    supplier_id: Mapped[int] = mapped_column(ForeignKey("supplier.id"), nullable=False, index=True)
    status: Mapped[PurchaseOrderStatus] = mapped_column(
        Enum(PurchaseOrderStatus, values_callable=_enum_values, native_enum=False, length=20),
        default=PurchaseOrderStatus.OPEN,
        server_default=PurchaseOrderStatus.OPEN.value,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    received_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    supplier: Mapped[Supplier] = relationship("Supplier", back_populates="purchase_orders")
    items: Mapped[list[PurchaseOrderItem]] = relationship(
        "PurchaseOrderItem",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.id",
    )

    def __repr__(self) -> str:
        return f"<PurchaseOrder(id={self.id}, status={self.status})>"

    @property
    def total_amount(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal(0))


class PurchaseOrderItem(Base):
    """Line item in a purchase order."""
    __tablename__ = "purchase_order_item"

    id: Mapped[int] = mapped_column(primary_key=True)
    purchase_order_id: Mapped[int] = mapped_column(ForeignKey("purchase_order.id"), nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("product.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    purchase_order: Mapped[PurchaseOrder] = relationship("PurchaseOrder", back_populates="items")
    product: Mapped[Product] = relationship("Product", back_populates="purchase_items")

    def __repr__(self) -> str:
        return f"<PurchaseOrderItem(id={self.id}, product_id={self.product_id}, qty={self.quantity})>"

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.unit_price) * self.quantity


class SalesOrder(Base):
    """Customer order. Creating it draws stock; cancelling it puts the stock back."""
    __tablename__ = "sales_order"
    __table_args__ = (
        Index("ix_sales_order_customer_status", "customer_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[SalesOrderStatus] = mapped_column(
        Enum(SalesOrderStatus, values_callable=_enum_values, native_enum=False, length=20),
        default=SalesOrderStatus.OPEN,
        server_default=SalesOrderStatus.OPEN.value,
        nullable=False,
    )
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("user.id"), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True,
    )

    items: Mapped[list[SalesOrderItem]] = relationship(
        "SalesOrderItem",
        back_populates="sales_order",
        cascade="all, delete-orphan",
        order_by="SalesOrderItem.id",
    )
    created_by: Mapped[User | None] = relationship("User")

    def __repr__(self) -> str:
        return f"<SalesOrder(id={self.id}, customer_id={self.customer_id}, status={self.status})>"

    @property
    def total_amount(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal(0))


class SalesOrderItem(Base):
    """Line item in a sales order."""
    __tablename__ = "sales_order_item"

    id: Mapped[int] = mapped_column(primary_key=True)
    sales_order_id: Mapped[int] = mapped_column(ForeignKey("sales_order.id"), nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("product.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    sales_order: Mapped[SalesOrder] = relationship("SalesOrder", back_populates="items")
    product: Mapped[Product] = relationship("Product", back_populates="sales_items")

    def __repr__(self) -> str:
        return f"<SalesOrderItem(id={self.id}, product_id={self.product_id}, qty={self.quantity})>"

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.unit_price) * self.quantity
