"""Inventory report endpoints."""
import datetime as dt

from fastapi import APIRouter, Query

from app.core.config import settings
from app.models import inventory_schemas as schemas

from .dependencies import InventoryServiceDep

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/inventory-value", response_model=schemas.InventoryValueReport)
def inventory_value(service: InventoryServiceDep):
    """Stock valued at cost, in total and per warehouse."""
    return service.reports.inventory_value()


@router.get("/low-stock", response_model=schemas.LowStockReport)
def low_stock(
    service: InventoryServiceDep,
    threshold: int = Query(settings.LOW_STOCK_THRESHOLD, ge=0),
):
    return service.reports.low_stock(threshold)


@router.get("/stock-movements", response_model=schemas.StockMovementReport)
def stock_movements(
    service: InventoryServiceDep,
    start_date: dt.datetime = Query(...),
    end_date: dt.datetime = Query(...),
):
    return service.reports.stock_movements(start_date, end_date)


@router.get("/sales", response_model=schemas.SalesReport)
def sales(
    service: InventoryServiceDep,
    start_date: dt.datetime = Query(...),
    end_date: dt.datetime = Query(...),
):
    return service.reports.sales(start_date, end_date)


@router.get("/purchases", response_model=schemas.PurchaseReport)
def purchases(
    service: InventoryServiceDep,
    start_date: dt.datetime = Query(...),
    end_date: dt.datetime = Query(...),
):
    return service.reports.purchases(start_date, end_date)


@router.get("/warehouse-utilization", response_model=list[schemas.WarehouseUtilization])
def warehouse_utilization(service: InventoryServiceDep):
    return service.reports.warehouse_utilization()
