"""Helper functions for inventory routes."""
from typing import Any, Iterable

from app.api.dependencies import PageParams
from app.models import inventory_schemas as schemas
from app.models.schemas import Pagination
from app.services.inventory import InventoryService


def paginate(items: Iterable[Any], total: int, params: PageParams) -> dict[str, Any]:
    """``{data, pagination}`` envelope; the route's ``Page[...]`` response model validates ``data``."""
    return {
        "data": list(items),
        "pagination": Pagination.build(total, params.page, params.page_size),
    }


def category_to_out(category) -> schemas.CategoryOut:
    """Convert Category model to CategoryOut schema."""
    out = schemas.CategoryOut.model_validate(category)
    out.product_count = len(category.products)
    return out


def supplier_to_out(supplier, service: InventoryService) -> schemas.SupplierOut:
    out = schemas.SupplierOut.model_validate(supplier)
    out.product_count, out.purchase_order_count = service.suppliers.counts(supplier.id)
    return out


def supplier_to_detail(supplier, service: InventoryService) -> schemas.SupplierDetailOut:
    out = schemas.SupplierDetailOut.model_validate(supplier)
    out.product_count, out.purchase_order_count = service.suppliers.counts(supplier.id)
    out.products = [schemas.ProductRef.model_validate(p) for p in supplier.products]
    out.recent_purchase_orders = [
        schemas.PurchaseOrderSummaryOut.model_validate(po) for po in supplier.purchase_orders[:10]
    ]
    return out


def warehouse_to_out(warehouse, service: InventoryService, detail: bool = False) -> schemas.WarehouseOut:
    schema = schemas.WarehouseDetailOut if detail else schemas.WarehouseOut
    out = schema.model_validate(warehouse)
    out.product_count, out.stock_count = service.warehouses.counts(warehouse.id)
    return out


def product_to_detail(product, service: InventoryService) -> schemas.ProductDetailOut:
    """Product with each stock row and its 10 latest movements."""
    stocks = [
        schemas.StockWithMovementsOut(
            **schemas.StockSummaryOut.model_validate(stock).model_dump(),
            location=schemas.LocationOut.model_validate(stock.location),
            recent_movements=[
                schemas.StockMovementOut.model_validate(m)
                for m in service.stock.recent_movements(stock.id, limit=10)
            ],
        )
        for stock in product.stocks
    ]
    out = schemas.ProductOut.model_validate(product)
    return schemas.ProductDetailOut(**{**out.model_dump(), "stocks": stocks})
