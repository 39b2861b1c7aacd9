"""Sales order endpoints."""
import datetime as dt
import logging

from fastapi import APIRouter, Query

from app.api.dependencies import PageDep
from app.models import inventory_schemas as schemas
from app.models.inventory_models import SalesOrderStatus
from app.models.schemas import Page

from .dependencies import InventoryServiceDep, InventoryServiceManagerDep
from .helpers import paginate

router = APIRouter(prefix="/sales-orders", tags=["sales-orders"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[schemas.SalesOrderOut])
def list_sales_orders(
    service: InventoryServiceDep,
    params: PageDep,
    customer_id: int | None = Query(None),
    status: SalesOrderStatus | None = Query(None),
    start_date: dt.datetime | None = Query(None),
    end_date: dt.datetime | None = Query(None),
):
    orders, total = service.sales_orders.list(
        customer_id=customer_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        page=params.page,
        page_size=params.page_size,
    )
    return paginate(orders, total, params)


@router.get("/stats", response_model=schemas.SalesOrderStats)
def sales_order_stats(
    service: InventoryServiceManagerDep,
    start_date: dt.datetime = Query(...),
    end_date: dt.datetime = Query(...),
):
    return service.sales_orders.stats(start_date, end_date)


@router.get("/{order_id}", response_model=schemas.SalesOrderOut)
def get_sales_order(order_id: int, service: InventoryServiceDep):
    return service.sales_orders.get(order_id)


@router.post("", response_model=schemas.SalesOrderOut, status_code=201)
def create_sales_order(data: schemas.SalesOrderCreate, service: InventoryServiceDep):
    """Place an order; its items are drawn from stock immediately."""
    order = service.sales_orders.create(data)
    return service.sales_orders.get(order.id)


@router.patch("/{order_id}", response_model=schemas.SalesOrderOut)
def update_sales_order(order_id: int, data: schemas.SalesOrderUpdate, service: InventoryServiceManagerDep):
    return service.sales_orders.update(order_id, data)


@router.post("/{order_id}/cancel", response_model=schemas.SalesOrderOut)
def cancel_sales_order(order_id: int, service: InventoryServiceManagerDep):
    """Cancel an open order and return its stock."""
    return service.sales_orders.cancel(order_id)
