"""Common dependencies for authentication and role-based access control."""
from typing import Annotated, TypeAlias

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from app.api.routes_auth import get_current_user
from app.core.config import settings
from app.core.rbac import admin_required, manager_or_admin_required
from app.db.session import get_db
from app.models import models

DbDep: TypeAlias = Annotated[Session, Depends(get_db)]

# Any authenticated user
CurrentUserDep: TypeAlias = Annotated[models.User, Depends(get_current_user)]
# Admin or manager
ManagerUserDep: TypeAlias = Annotated[models.User, Depends(manager_or_admin_required)]
# Admin only
AdminUserDep: TypeAlias = Annotated[models.User, Depends(admin_required)]


class PageParams:
    """``page``/``page_size`` query parameters shared by list endpoints."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        page_size: int = Query(
            settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"
        ),
    ):
        self.page = page
        self.page_size = page_size


PageDep: TypeAlias = Annotated[PageParams, Depends()]
