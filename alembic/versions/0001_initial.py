from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True))
    return columns


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), server_default="user", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_user"),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_role", "user", ["role"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], name="fk_audit_log_user_id_user"),
        sa.PrimaryKeyConstraint("id", name="pk_audit_log"),
    )
    op.create_index("ix_audit_log_action", "audit_log", ["action"])
    op.create_index("ix_audit_log_user_id", "audit_log", ["user_id"])
    op.create_index("ix_audit_log_timestamp", "audit_log", ["timestamp"])
    op.create_index("ix_audit_log_entity_entity_id", "audit_log", ["entity", "entity_id"])

    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_category"),
        sa.UniqueConstraint("name", name="uq_category_name"),
    )

    op.create_table(
        "supplier",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("contact_name", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_supplier"),
        sa.UniqueConstraint("email", name="uq_supplier_email"),
    )
    op.create_index("ix_supplier_name", "supplier", ["name"])

    op.create_table(
        "warehouse",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        *_timestamps(with_updated=False),
        sa.CheckConstraint("capacity >= 1", name="ck_warehouse_capacity_positive"),
        sa.PrimaryKeyConstraint("id", name="pk_warehouse"),
    )

    op.create_table(
        "location",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"], name="fk_location_warehouse_id_warehouse"),
        sa.PrimaryKeyConstraint("id", name="pk_location"),
    )
    op.create_index("ix_location_warehouse_id", "location", ["warehouse_id"])

    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("sku", sa.String(length=50), nullable=False),
        sa.Column("barcode", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("supplier_id", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(15, 2), nullable=False),
        sa.Column("price", sa.Numeric(15, 2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], name="fk_product_category_id_category"),
        sa.ForeignKeyConstraint(["supplier_id"], ["supplier.id"], name="fk_product_supplier_id_supplier"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"], name="fk_product_warehouse_id_warehouse"),
        sa.PrimaryKeyConstraint("id", name="pk_product"),
        sa.UniqueConstraint("sku", name="uq_product_sku"),
        sa.UniqueConstraint("barcode", name="uq_product_barcode"),
    )
    op.create_index("ix_product_name", "product", ["name"])
    op.create_index("ix_product_category_id", "product", ["category_id"])
    op.create_index("ix_product_supplier_id", "product", ["supplier_id"])
    op.create_index("ix_product_warehouse_id", "product", ["warehouse_id"])

    op.create_table(
        "stock",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("location_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"], name="fk_stock_product_id_product"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"], name="fk_stock_warehouse_id_warehouse"),
        sa.ForeignKeyConstraint(["location_id"], ["location.id"], name="fk_stock_location_id_location"),
        sa.PrimaryKeyConstraint("id", name="pk_stock"),
        sa.UniqueConstraint("product_id", "location_id", name="uq_stock_product_location"),
    )
    op.create_index("ix_stock_product_id", "stock", ["product_id"])
    op.create_index("ix_stock_warehouse_id", "stock", ["warehouse_id"])
    op.create_index("ix_stock_location_id", "stock", ["location_id"])

    op.create_table(
        "stock_movement",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("stock_id", sa.Integer(), nullable=False),
        sa.Column("movement_type", sa.String(length=10), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=500), nullable=False),
        sa.Column("reference_type", sa.String(length=50), nullable=True),
        sa.Column("reference_id", sa.Integer(), nullable=True),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(with_updated=False),
        sa.ForeignKeyConstraint(["stock_id"], ["stock.id"], name="fk_stock_movement_stock_id_stock"),
        sa.ForeignKeyConstraint(["created_by_id"], ["user.id"], name="fk_stock_movement_created_by_id_user"),
        sa.PrimaryKeyConstraint("id", name="pk_stock_movement"),
    )
    op.create_index("ix_stock_movement_stock_id", "stock_movement", ["stock_id"])
    op.create_index("ix_stock_movement_created_at", "stock_movement", ["created_at"])
    op.create_index("ix_stock_movement_stock_date", "stock_movement", ["stock_id", "created_at"])
    op.create_index("ix_stock_movement_reference", "stock_movement", ["reference_type", "reference_id"])

    op.create_table(
        "stock_adjustment",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("stock_id", sa.Integer(), nullable=False),
        sa.Column("adjustment_type", sa.String(length=10), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=500), nullable=False),
        sa.Column("approved_by_id", sa.Integer(), nullable=False),
        *_timestamps(with_updated=False),
        sa.ForeignKeyConstraint(["stock_id"], ["stock.id"], name="fk_stock_adjustment_stock_id_stock"),
        sa.ForeignKeyConstraint(["approved_by_id"], ["user.id"], name="fk_stock_adjustment_approved_by_id_user"),
        sa.PrimaryKeyConstraint("id", name="pk_stock_adjustment"),
    )
    op.create_index("ix_stock_adjustment_stock_id", "stock_adjustment", ["stock_id"])

    op.create_table(
        "purchase_order",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("supplier_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="open", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(with_updated=False),
        sa.Column("received_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["supplier_id"], ["supplier.id"], name="fk_purchase_order_supplier_id_supplier"),
        sa.PrimaryKeyConstraint("id", name="pk_purchase_order"),
    )
    op.create_index("ix_purchase_order_supplier_id", "purchase_order", ["supplier_id"])
    op.create_index("ix_purchase_order_created_at", "purchase_order", ["created_at"])
    op.create_index("ix_purchase_order_supplier_status", "purchase_order", ["supplier_id", "status"])

    op.create_table(
        "purchase_order_item",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("purchase_order_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(15, 2), nullable=False),
        sa.ForeignKeyConstraint(
            ["purchase_order_id"], ["purchase_order.id"], name="fk_purchase_order_item_purchase_order_id_purchase_order"
        ),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"], name="fk_purchase_order_item_product_id_product"),
        sa.PrimaryKeyConstraint("id", name="pk_purchase_order_item"),
    )
    op.create_index("ix_purchase_order_item_purchase_order_id", "purchase_order_item", ["purchase_order_id"])
    op.create_index("ix_purchase_order_item_product_id", "purchase_order_item", ["product_id"])

    op.create_table(
        "sales_order",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="open", nullable=False),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["created_by_id"], ["user.id"], name="fk_sales_order_created_by_id_user"),
        sa.PrimaryKeyConstraint("id", name="pk_sales_order"),
    )
    op.create_index("ix_sales_order_created_at", "sales_order", ["created_at"])
    op.create_index("ix_sales_order_customer_status", "sales_order", ["customer_id", "status"])

    op.create_table(
        "sales_order_item",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sales_order_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(15, 2), nullable=False),
        sa.ForeignKeyConstraint(
            ["sales_order_id"], ["sales_order.id"], name="fk_sales_order_item_sales_order_id_sales_order"
        ),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"], name="fk_sales_order_item_product_id_product"),
        sa.PrimaryKeyConstraint("id", name="pk_sales_order_item"),
    )
    op.create_index("ix_sales_order_item_sales_order_id", "sales_order_item", ["sales_order_id"])
    op.create_index("ix_sales_order_item_product_id", "sales_order_item", ["product_id"])


def downgrade() -> None:
    for table in (
        "sales_order_item",
        "sales_order",
        "purchase_order_item",
        "purchase_order",
        "stock_adjustment",
        "stock_movement",
        "stock",
        "product",
        "location",
        "warehouse",
        "supplier",
        "category",
        "audit_log",
        "user",
    ):
        op.drop_table(table)
