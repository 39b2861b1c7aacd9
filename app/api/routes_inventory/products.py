"""Product endpoints."""
import logging

from fastapi import APIRouter, Query

from app.api.dependencies import PageDep
from app.models import inventory_schemas as schemas
from app.models.schemas import Page

from .dependencies import InventoryServiceAdminDep, InventoryServiceDep, InventoryServiceManagerDep
from .helpers import paginate, product_to_detail

router = APIRouter(prefix="/products", tags=["products"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[schemas.ProductOut])
def list_products(
    service: InventoryServiceDep,
    params: PageDep,
    search: str | None = Query(None, description="Search by name, SKU, or barcode"),
    category_id: int | None = Query(None, description="Filter by category"),
    supplier_id: int | None = Query(None, description="Filter by supplier"),
    warehouse_id: int | None = Query(None, description="Filter by warehouse"),
):
    """List products with filtering and pagination."""
    products, total = service.products.list_products(
        page=params.page,
        page_size=params.page_size,
        search=search,
        category_id=category_id,
        supplier_id=supplier_id,
        warehouse_id=warehouse_id,
    )
    return paginate(products, total, params)


@router.get("/{product_id}", response_model=schemas.ProductDetailOut)
def get_product(product_id: int, service: InventoryServiceDep):
    """Get a product with its stock rows and their latest movements."""
    return product_to_detail(service.products.get_product(product_id), service)


@router.get("/{product_id}/stock", response_model=schemas.ProductStockOut)
def get_product_stock(product_id: int, service: InventoryServiceDep):
    """Stock levels of a product across every location."""
    product, stocks = service.products.get_product_stock(product_id)
    return schemas.ProductStockOut(
        product_id=product.id,
        total_quantity=sum(s.quantity for s in stocks),
        stocks=[schemas.StockOut.model_validate(s) for s in stocks],
    )


@router.post("", response_model=schemas.ProductOut, status_code=201)
def create_product(data: schemas.ProductCreate, service: InventoryServiceManagerDep):
    """Create a new product."""
    return service.products.create_product(data)


@router.patch("/{product_id}", response_model=schemas.ProductOut)
def update_product(product_id: int, data: schemas.ProductUpdate, service: InventoryServiceManagerDep):
    return service.products.update_product(product_id, data)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, service: InventoryServiceAdminDep):
    """Delete a product that has no stock or order history."""
    service.products.delete_product(product_id)
