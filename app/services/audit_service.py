"""Data-change audit trail.

``record_audit`` adds an ``AuditLog`` row to the caller's session so it commits
or rolls back together with the change it describes. ``AuditService`` serves
the read side for the admin endpoints.
"""
from __future__ import annotations

import datetime as dt
import json
import logging
from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.models import AuditLog

logger = logging.getLogger(__name__)


def record_audit(
    db: Session,
    action: str,
    entity: str,
    entity_id: int,
    user_id: int | None,
    **details: Any,
) -> AuditLog:
    entry = AuditLog(
        action=action,
        entity=entity,
        entity_id=entity_id,
        user_id=user_id,
        details=json.dumps(details, default=str, sort_keys=True),
    )
    db.add(entry)
    logger.debug("audit %s:%s id=%s user=%s", entity, action, entity_id, user_id)
    return entry


class AuditService:
    def __init__(self, db: Session):
        self._db = db

    def list(
        self,
        entity: str | None = None,
        action: str | None = None,
        user_id: int | None = None,
        start_date: dt.datetime | None = None,
        end_date: dt.datetime | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[Sequence[AuditLog], int]:
        stmt = select(AuditLog)
        if entity:
            stmt = stmt.where(AuditLog.entity == entity)
        if action:
            stmt = stmt.where(AuditLog.action == action)
        if user_id is not None:
            stmt = stmt.where(AuditLog.user_id == user_id)
        if start_date:
            stmt = stmt.where(AuditLog.timestamp >= start_date)
        if end_date:
            stmt = stmt.where(AuditLog.timestamp <= end_date)

        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        rows = self._db.scalars(
            stmt.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        return rows, total

    def entity_history(self, entity: str, entity_id: int) -> Sequence[AuditLog]:
        return self._db.scalars(
            select(AuditLog)
            .where(AuditLog.entity == entity, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        ).all()

    def summary(
        self,
        start_date: dt.datetime | None = None,
        end_date: dt.datetime | None = None,
    ) -> dict[str, int]:
        """Count entries grouped as ``"<entity>:<action>"``."""
        stmt = select(AuditLog.entity, AuditLog.action, func.count(AuditLog.id)).group_by(
            AuditLog.entity, AuditLog.action
        )
        if start_date:
            stmt = stmt.where(AuditLog.timestamp >= start_date)
        if end_date:
            stmt = stmt.where(AuditLog.timestamp <= end_date)
        return {f"{entity}:{action}": count for entity, action, count in self._db.execute(stmt)}
