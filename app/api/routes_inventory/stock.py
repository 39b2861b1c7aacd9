"""Stock level, movement, adjustment and transfer endpoints."""
import logging

from fastapi import APIRouter, Query

from app.api.dependencies import PageDep
from app.models import inventory_schemas as schemas
from app.models.schemas import Page

from .dependencies import InventoryServiceDep, InventoryServiceManagerDep
from .helpers import paginate

router = APIRouter(prefix="/stock", tags=["stock"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[schemas.StockOut])
def list_stock(
    service: InventoryServiceDep,
    params: PageDep,
    product_id: int | None = Query(None),
    warehouse_id: int | None = Query(None),
    location_id: int | None = Query(None),
):
    stocks, total = service.stock.list_stock(
        product_id=product_id,
        warehouse_id=warehouse_id,
        location_id=location_id,
        page=params.page,
        page_size=params.page_size,
    )
    return paginate(stocks, total, params)


@router.get("/{stock_id}", response_model=schemas.StockDetailOut)
def get_stock(stock_id: int, service: InventoryServiceDep):
    """Stock row with its movements and adjustments, newest first."""
    return service.stock.get_stock(stock_id)


@router.post("", response_model=schemas.StockOut, status_code=201)
def create_stock(data: schemas.StockCreate, service: InventoryServiceManagerDep):
    return service.stock.create_stock(data)


@router.post("/{stock_id}/movements", response_model=schemas.StockMovementOut, status_code=201)
def record_movement(stock_id: int, data: schemas.StockMovementCreate, service: InventoryServiceManagerDep):
    """Record stock coming in or going out."""
    return service.stock.record_movement(stock_id, data)


@router.get("/{stock_id}/movements", response_model=Page[schemas.StockMovementOut])
def list_movements(stock_id: int, service: InventoryServiceDep, params: PageDep):
    movements, total = service.stock.list_movements(stock_id, page=params.page, page_size=params.page_size)
    return paginate(movements, total, params)


@router.post("/{stock_id}/adjustments", response_model=schemas.StockAdjustmentOut, status_code=201)
def create_adjustment(stock_id: int, data: schemas.StockAdjustmentCreate, service: InventoryServiceManagerDep):
    """Manual correction, approved by the caller."""
    return service.stock.adjust_stock(stock_id, data)


@router.post("/{source_stock_id}/transfer", response_model=schemas.StockTransferOut)
def transfer_stock(source_stock_id: int, data: schemas.StockTransferCreate, service: InventoryServiceManagerDep):
    """Move quantity to the same product's stock at another location."""
    source, target = service.stock.transfer_stock(source_stock_id, data)
    return schemas.StockTransferOut(
        source_stock=schemas.StockOut.model_validate(source),
        target_stock=schemas.StockOut.model_validate(target),
    )
