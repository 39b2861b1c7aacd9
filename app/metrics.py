"""Metrics facade.

Service code should ONLY call the semantic helpers here so the counters can be
renamed or relabelled in one place. ``/metrics`` exposes the default registry.
"""

from __future__ import annotations

import logging

from prometheus_client import Counter

logger = logging.getLogger("metrics")

_STOCK_MOVEMENTS = Counter(
    "inventory_stock_movements_total", "Stock movements recorded through the movement endpoint", ["movement_type"]
)
_STOCK_ADJUSTMENTS = Counter(
    "inventory_stock_adjustments_total", "Manual stock adjustments", ["adjustment_type"]
)
_STOCK_TRANSFERS = Counter("inventory_stock_transfers_total", "Stock transfers between locations")
_PURCHASE_ORDERS_RECEIVED = Counter("inventory_purchase_orders_received_total", "Purchase orders received")
_SALES_ORDERS_CREATED = Counter("inventory_sales_orders_created_total", "Sales orders created")
_SALES_ORDERS_CANCELLED = Counter("inventory_sales_orders_cancelled_total", "Sales orders cancelled")
_LOGINS = Counter("auth_logins_total", "Login attempts", ["outcome"])
_RATE_LIMITED = Counter("rate_limit_exceeded_total", "Requests rejected by the rate limiter")


def stock_movement_recorded(movement_type: str) -> None:
    _STOCK_MOVEMENTS.labels(movement_type=movement_type).inc()


def stock_adjusted(adjustment_type: str) -> None:
    _STOCK_ADJUSTMENTS.labels(adjustment_type=adjustment_type).inc()


def stock_transferred() -> None:
    _STOCK_TRANSFERS.inc()


def purchase_order_received() -> None:
    _PURCHASE_ORDERS_RECEIVED.inc()


def sales_order_created() -> None:
    _SALES_ORDERS_CREATED.inc()


def sales_order_cancelled() -> None:
    _SALES_ORDERS_CANCELLED.inc()


def login_succeeded() -> None:
    _LOGINS.labels(outcome="success").inc()


def login_failed() -> None:
    _LOGINS.labels(outcome="failure").inc()


def rate_limit_exceeded() -> None:
    _RATE_LIMITED.inc()
    logger.info("rate limit exceeded")
