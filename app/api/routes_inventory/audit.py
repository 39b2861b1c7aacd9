"""Audit log endpoints (admin only)."""
import datetime as dt

from fastapi import APIRouter, Query

from app.api.dependencies import AdminUserDep, DbDep, PageDep
from app.models import inventory_schemas as schemas
from app.models.schemas import Page
from app.services.audit_service import AuditService
from app.services.inventory import as_utc, ensure_date_range

from .helpers import paginate

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=Page[schemas.AuditLogOut])
def list_audit_logs(
    _admin: AdminUserDep,
    db: DbDep,
    params: PageDep,
    entity: str | None = Query(None),
    action: str | None = Query(None),
    user_id: int | None = Query(None),
    start_date: dt.datetime | None = Query(None),
    end_date: dt.datetime | None = Query(None),
):
    start_date, end_date = as_utc(start_date), as_utc(end_date)
    if start_date and end_date:
        ensure_date_range(start_date, end_date)
    logs, total = AuditService(db).list(
        entity=entity,
        action=action,
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        page=params.page,
        page_size=params.page_size,
    )
    return paginate(logs, total, params)


@router.get("/summary", response_model=schemas.AuditSummary)
def audit_summary(
    _admin: AdminUserDep,
    db: DbDep,
    start_date: dt.datetime | None = Query(None),
    end_date: dt.datetime | None = Query(None),
):
    """Entry counts keyed ``"<entity>:<action>"``."""
    start_date, end_date = as_utc(start_date), as_utc(end_date)
    if start_date and end_date:
        ensure_date_range(start_date, end_date)
    counts = AuditService(db).summary(start_date, end_date)
    return schemas.AuditSummary(total=sum(counts.values()), summary=counts)


@router.get("/{entity}/{entity_id}", response_model=list[schemas.AuditLogOut])
def entity_history(entity: str, entity_id: int, _admin: AdminUserDep, db: DbDep):
    return AuditService(db).entity_history(entity, entity_id)
