from typing import Iterable

from fastapi import Depends, Request

from app.api.routes_auth import get_current_user
from app.core.audit import log_denied
from app.core.exceptions import PermissionDeniedError
from app.models import models


def require_roles(allowed: Iterable[str]):
    allowed_set = {r.lower() for r in allowed}

    def _dependency(request: Request, user: models.User = Depends(get_current_user)) -> models.User:
        if user.role.lower() not in allowed_set:
            log_denied(
                "rbac.check",
                user_id=user.id,
                reason="insufficient_role",
                role=user.role,
                path=request.url.path,
                method=request.method,
            )
            raise PermissionDeniedError(required_roles=sorted(allowed_set))
        return user

    return _dependency


admin_required = require_roles([models.UserRole.ADMIN.value])
manager_or_admin_required = require_roles([models.UserRole.ADMIN.value, models.UserRole.MANAGER.value])
