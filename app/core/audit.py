"""Security event logging.

Emits one structured JSON line per authentication or authorization event on the
``audit`` logger and, when ``AUDIT_LOG_FILE`` is set, appends it to that file.
Data changes are recorded in the ``audit_log`` table by
``app.services.audit_service`` instead.
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any

_AUDIT_LOG_PATH = os.getenv("AUDIT_LOG_FILE")
_logger = logging.getLogger("audit")


def log_audit_event(action: str, user_id: int | None = None, status: str = "success", **metadata: Any) -> None:
    """Record a security event.

    Parameters:
        action: A machine-readable action key (e.g. 'auth.login', 'auth.register').
        user_id: The acting user's ID (if available).
        status: 'success' | 'failure' | 'denied'.
        **metadata: Additional context fields (username, role, path, ...).
    """
    event = {
        "ts": int(time.time()),
        "action": action,
        "user_id": user_id,
        "status": status,
        **metadata,
    }
    line = json.dumps(event, separators=(",", ":"), default=str)
    if _AUDIT_LOG_PATH:
        try:
            directory = os.path.dirname(_AUDIT_LOG_PATH)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(_AUDIT_LOG_PATH, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            _logger.warning("Failed to write audit event to %s", _AUDIT_LOG_PATH)
    _logger.info(line)


def log_denied(action: str, user_id: int | None = None, reason: str | None = None, **extra: Any) -> None:
    log_audit_event(action, user_id=user_id, status="denied", reason=reason, **extra)


def log_failure(action: str, user_id: int | None = None, error: str | None = None, **extra: Any) -> None:
    log_audit_event(action, user_id=user_id, status="failure", error=error, **extra)
