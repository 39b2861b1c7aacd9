"""
Inventory API Routes.

RESTful endpoints for inventory management, one module per resource:
- Categories, products, suppliers, warehouses/locations
- Stock levels, movements, adjustments and transfers
- Purchase orders and sales orders
- Reports and the audit log
"""
from fastapi import APIRouter

from .audit import router as audit_router
from .categories import router as categories_router
from .products import router as products_router
from .purchase_orders import router as purchase_orders_router
from .reports import router as reports_router
from .sales_orders import router as sales_orders_router
from .stock import router as stock_router
from .suppliers import router as suppliers_router
from .warehouses import router as warehouses_router

# Create main router and include sub-routers
router = APIRouter()
router.include_router(categories_router)
router.include_router(products_router)
router.include_router(suppliers_router)
router.include_router(warehouses_router)
router.include_router(stock_router)
router.include_router(purchase_orders_router)
router.include_router(sales_orders_router)
router.include_router(reports_router)
router.include_router(audit_router)

__all__ = ["router"]
