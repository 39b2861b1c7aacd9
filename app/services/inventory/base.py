"""
Base inventory service with shared functionality.

Every mutating workflow runs inside ``_atomic()``: one transaction that commits
when the block finishes and rolls back on any exception. Stock rows that are
read and then written are selected ``FOR UPDATE`` so concurrent requests
serialise on the row.
"""
from __future__ import annotations

import logging
import datetime as dt
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationFailedError
from app.models.inventory_models import Stock
from app.services.audit_service import record_audit

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def as_utc(value: dt.datetime | None) -> dt.datetime | None:
    """Convert a datetime to aware UTC; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def ensure_date_range(start_date: dt.datetime, end_date: dt.datetime) -> tuple[dt.datetime, dt.datetime]:
    """Normalise a reporting window to UTC and reject one that ends before it starts."""
    start_date = as_utc(start_date)
    end_date = as_utc(end_date)
    if end_date < start_date:
        raise ValidationFailedError(
            "End date must be after start date",
            {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    return start_date, end_date


class BaseInventoryService:
    """
    Base service class with shared inventory functionality.

    All inventory-related services inherit from this class
    to share database session and acting-user context.
    """

    def __init__(self, db: Session, user_id: int | None):
        """
        Args:
            db: SQLAlchemy database session
            user_id: ID of the authenticated user performing the operations
        """
        self._db = db
        self._user_id = user_id

    @property
    def db(self) -> Session:
        return self._db

    @property
    def user_id(self) -> int | None:
        return self._user_id

    @contextmanager
    def _atomic(self) -> Iterator[Session]:
        try:
            yield self._db
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

    def _get_or_404(self, model: type[ModelT], entity_id: int, label: str | None = None) -> ModelT:
        obj = self._db.get(model, entity_id)
        if obj is None:
            raise NotFoundError(label or model.__name__, entity_id)
        return obj

    def _lock_stock(self, stock_id: int) -> Stock | None:
        return self._db.scalar(
            select(Stock)
            .where(Stock.id == stock_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    def _lock_stocks(self, stock_ids: Iterable[int]) -> dict[int, Stock]:
        """Lock several stock rows at once, always in ascending id order."""
        rows = self._db.scalars(
            select(Stock)
            .where(Stock.id.in_(sorted(set(stock_ids))))
            .order_by(Stock.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {stock.id: stock for stock in rows}

    def _lock_product_stocks(self, product_ids: Iterable[int]) -> dict[int, list[Stock]]:
        """Lock every stock row of the given products in ascending id order, grouped by product."""
        wanted = sorted(set(product_ids))
        grouped: dict[int, list[Stock]] = {pid: [] for pid in wanted}
        rows = self._db.scalars(
            select(Stock)
            .where(Stock.product_id.in_(wanted))
            .order_by(Stock.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        for stock in rows:
            grouped[stock.product_id].append(stock)
        return grouped

    def _audit(self, action: str, entity: str, entity_id: int, **details: Any) -> None:
        record_audit(self._db, action, entity, entity_id, self._user_id, **details)
