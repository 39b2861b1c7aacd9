"""Warehouse and location endpoints."""
import logging

from fastapi import APIRouter

from app.api.dependencies import PageDep
from app.models import inventory_schemas as schemas
from app.models.schemas import Page

from .dependencies import InventoryServiceAdminDep, InventoryServiceDep, InventoryServiceManagerDep
from .helpers import paginate, warehouse_to_out

router = APIRouter(prefix="/warehouses", tags=["warehouses"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[schemas.WarehouseOut])
def list_warehouses(service: InventoryServiceDep, params: PageDep):
    warehouses, total = service.warehouses.list(page=params.page, page_size=params.page_size)
    return paginate((warehouse_to_out(w, service) for w in warehouses), total, params)


@router.get("/{warehouse_id}", response_model=schemas.WarehouseDetailOut)
def get_warehouse(warehouse_id: int, service: InventoryServiceDep):
    """Warehouse with its locations and the stock held at each."""
    return warehouse_to_out(service.warehouses.get(warehouse_id), service, detail=True)


@router.post("", response_model=schemas.WarehouseOut, status_code=201)
def create_warehouse(data: schemas.WarehouseCreate, service: InventoryServiceManagerDep):
    return warehouse_to_out(service.warehouses.create(data), service)


@router.patch("/{warehouse_id}", response_model=schemas.WarehouseOut)
def update_warehouse(warehouse_id: int, data: schemas.WarehouseUpdate, service: InventoryServiceManagerDep):
    return warehouse_to_out(service.warehouses.update(warehouse_id, data), service)


@router.delete("/{warehouse_id}", status_code=204)
def delete_warehouse(warehouse_id: int, service: InventoryServiceAdminDep):
    """Delete a warehouse without products or stock, together with its locations."""
    service.warehouses.delete(warehouse_id)


@router.post("/{warehouse_id}/locations", response_model=schemas.LocationOut, status_code=201)
def add_location(warehouse_id: int, data: schemas.LocationCreate, service: InventoryServiceManagerDep):
    return service.warehouses.add_location(warehouse_id, data)


@router.delete("/locations/{location_id}", status_code=204)
def delete_location(location_id: int, service: InventoryServiceManagerDep):
    service.warehouses.delete_location(location_id)
