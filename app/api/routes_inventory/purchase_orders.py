"""Purchase order endpoints."""
import logging

from fastapi import APIRouter, Body, Query

from app.api.dependencies import PageDep
from app.models import inventory_schemas as schemas
from app.models.inventory_models import PurchaseOrderStatus
from app.models.schemas import Page

from .dependencies import InventoryServiceAdminDep, InventoryServiceDep, InventoryServiceManagerDep
from .helpers import paginate

router = APIRouter(prefix="/purchase-orders", tags=["purchase-orders"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[schemas.PurchaseOrderOut])
def list_purchase_orders(
    service: InventoryServiceDep,
    params: PageDep,
    supplier_id: int | None = Query(None),
    status: PurchaseOrderStatus | None = Query(None),
):
    """List purchase orders, newest first."""
    orders, total = service.purchase_orders.list(
        supplier_id=supplier_id, status=status, page=params.page, page_size=params.page_size
    )
    return paginate(orders, total, params)


@router.get("/{order_id}", response_model=schemas.PurchaseOrderOut)
def get_purchase_order(order_id: int, service: InventoryServiceDep):
    return service.purchase_orders.get(order_id)


@router.post("", response_model=schemas.PurchaseOrderOut, status_code=201)
def create_purchase_order(data: schemas.PurchaseOrderCreate, service: InventoryServiceManagerDep):
    order = service.purchase_orders.create(data)
    return service.purchase_orders.get(order.id)


@router.patch("/{order_id}", response_model=schemas.PurchaseOrderOut)
def update_purchase_order(order_id: int, data: schemas.PurchaseOrderUpdate, service: InventoryServiceManagerDep):
    return service.purchase_orders.update(order_id, data)


@router.post("/{order_id}/receive", response_model=schemas.PurchaseOrderOut)
def receive_purchase_order(
    order_id: int,
    service: InventoryServiceManagerDep,
    data: schemas.PurchaseOrderReceive | None = Body(None),
):
    """Book every item of the order into stock."""
    return service.purchase_orders.receive(order_id, location_id=data.location_id if data else None)


@router.delete("/{order_id}", status_code=204)
def delete_purchase_order(order_id: int, service: InventoryServiceAdminDep):
    service.purchase_orders.delete(order_id)
