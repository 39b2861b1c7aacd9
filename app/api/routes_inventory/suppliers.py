"""Supplier endpoints."""
import logging

from fastapi import APIRouter, Query

from app.api.dependencies import PageDep
from app.models import inventory_schemas as schemas
from app.models.schemas import Page

from .dependencies import InventoryServiceAdminDep, InventoryServiceDep, InventoryServiceManagerDep
from .helpers import paginate, supplier_to_detail, supplier_to_out

router = APIRouter(prefix="/suppliers", tags=["suppliers"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[schemas.SupplierOut])
def list_suppliers(
    service: InventoryServiceDep,
    params: PageDep,
    search: str | None = Query(None, description="Search by name or email"),
):
    suppliers, total = service.suppliers.list(search=search, page=params.page, page_size=params.page_size)
    return paginate((supplier_to_out(s, service) for s in suppliers), total, params)


@router.get("/stats", response_model=schemas.SupplierStats)
def all_supplier_stats(service: InventoryServiceManagerDep):
    """Purchasing statistics across all suppliers."""
    return service.suppliers.stats()


@router.get("/{supplier_id}", response_model=schemas.SupplierDetailOut)
def get_supplier(supplier_id: int, service: InventoryServiceDep):
    """Supplier with its products and 10 latest purchase orders."""
    return supplier_to_detail(service.suppliers.get(supplier_id), service)


@router.get("/{supplier_id}/stats", response_model=schemas.SupplierStats)
def supplier_stats(supplier_id: int, service: InventoryServiceManagerDep):
    return service.suppliers.stats(supplier_id)


@router.post("", response_model=schemas.SupplierOut, status_code=201)
def create_supplier(data: schemas.SupplierCreate, service: InventoryServiceManagerDep):
    """Create a new supplier."""
    return supplier_to_out(service.suppliers.create(data), service)


@router.patch("/{supplier_id}", response_model=schemas.SupplierOut)
def update_supplier(supplier_id: int, data: schemas.SupplierUpdate, service: InventoryServiceManagerDep):
    return supplier_to_out(service.suppliers.update(supplier_id, data), service)


@router.delete("/{supplier_id}", status_code=204)
def delete_supplier(supplier_id: int, service: InventoryServiceAdminDep):
    service.suppliers.delete(supplier_id)
