"""Product category endpoints."""
import logging

from fastapi import APIRouter, Query

from app.api.dependencies import PageDep
from app.models import inventory_schemas as schemas
from app.models.schemas import Page

from .dependencies import InventoryServiceAdminDep, InventoryServiceDep, InventoryServiceManagerDep
from .helpers import category_to_out, paginate

router = APIRouter(prefix="/categories", tags=["categories"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[schemas.CategoryOut])
def list_categories(
    service: InventoryServiceDep,
    params: PageDep,
    search: str | None = Query(None, description="Search by name"),
):
    """List product categories."""
    categories, total = service.categories.list_categories(
        search=search, page=params.page, page_size=params.page_size
    )
    return paginate((category_to_out(c) for c in categories), total, params)


@router.get("/{category_id}", response_model=schemas.CategoryOut)
def get_category(category_id: int, service: InventoryServiceDep):
    return category_to_out(service.categories.get_category(category_id))


@router.post("", response_model=schemas.CategoryOut, status_code=201)
def create_category(data: schemas.CategoryCreate, service: InventoryServiceManagerDep):
    """Create a new product category."""
    return category_to_out(service.categories.create_category(data))


@router.patch("/{category_id}", response_model=schemas.CategoryOut)
def update_category(category_id: int, data: schemas.CategoryUpdate, service: InventoryServiceManagerDep):
    return category_to_out(service.categories.update_category(category_id, data))


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, service: InventoryServiceAdminDep):
    """Delete a category no product uses."""
    service.categories.delete_category(category_id)
