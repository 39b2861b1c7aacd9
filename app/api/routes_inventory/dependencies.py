"""Common dependencies for inventory routes."""
from typing import Annotated, TypeAlias

from fastapi import Depends

from app.api.dependencies import AdminUserDep, CurrentUserDep, DbDep, ManagerUserDep
from app.services.inventory import InventoryService, build_inventory_service


def get_inventory_service(current_user: CurrentUserDep, db: DbDep) -> InventoryService:
    """InventoryService for any authenticated user (reads, sales orders)."""
    return build_inventory_service(db, user_id=current_user.id)


def get_inventory_service_manager(current_user: ManagerUserDep, db: DbDep) -> InventoryService:
    """InventoryService for admins and managers (catalogue and stock writes)."""
    return build_inventory_service(db, user_id=current_user.id)


def get_inventory_service_admin(current_user: AdminUserDep, db: DbDep) -> InventoryService:
    """InventoryService for admins only (deletes)."""
    return build_inventory_service(db, user_id=current_user.id)


InventoryServiceDep: TypeAlias = Annotated[InventoryService, Depends(get_inventory_service)]
InventoryServiceManagerDep: TypeAlias = Annotated[InventoryService, Depends(get_inventory_service_manager)]
InventoryServiceAdminDep: TypeAlias = Annotated[InventoryService, Depends(get_inventory_service_admin)]
