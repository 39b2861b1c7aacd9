"""Application exception hierarchy.

Every error the services raise on purpose derives from ``InventoryError`` so the
API layer can translate it into an HTTP response in one place
(see ``app.core.errors``).

Error codes follow the pattern [CATEGORY][NUMBER]:
- GEN: Generic request errors (001-099)
- STK: Stock mutation errors (100-199)
- ORD: Order workflow errors (200-299)
- AUT: Authentication/authorization errors (300-399)
"""

from __future__ import annotations

from typing import Any


class InventoryError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        code: str = "GEN000",
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with a client-facing message and metadata.

        Args:
            message: Message returned to the API client
            code: Unique error code (e.g., "STK100")
            status_code: HTTP status code (default: 400 Bad Request)
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "status": "error",
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# ============================================================================
# GENERIC ERRORS (GEN001-099)
# ============================================================================

class NotFoundError(InventoryError):
    """Requested entity does not exist."""

    def __init__(self, entity: str, entity_id: int | str | None = None):
        super().__init__(
            message=f"{entity} not found",
            code="GEN001",
            status_code=404,
            details={"entity": entity, "id": entity_id} if entity_id is not None else {"entity": entity},
        )


class ConflictError(InventoryError):
    """Uniqueness or referential rule would be violated."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, code="GEN002", status_code=400, details=details)


class ValidationFailedError(InventoryError):
    """Input passed schema validation but is semantically invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, code="GEN003", status_code=400, details=details)


# ============================================================================
# STOCK ERRORS (STK100-199)
# ============================================================================

class InsufficientStockError(InventoryError):
    """A stock row (or a product's total stock) cannot cover the request."""

    def __init__(self, message: str = "Insufficient stock quantity", details: dict[str, Any] | None = None):
        super().__init__(message=message, code="STK100", status_code=400, details=details)


# ============================================================================
# ORDER ERRORS (ORD200-299)
# ============================================================================

class InvalidStateError(InventoryError):
    """Operation not allowed in the entity's current status."""

    def __init__(self, message: str, current_status: str | None = None):
        super().__init__(
            message=message,
            code="ORD200",
            status_code=400,
            details={"current_status": current_status} if current_status else {},
        )


# ============================================================================
# AUTH ERRORS (AUT300-399)
# ============================================================================

class AuthenticationError(InventoryError):
    """Missing, invalid or expired credentials."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message, code="AUT300", status_code=401)


class PermissionDeniedError(InventoryError):
    """Authenticated user lacks the role required for the action."""

    def __init__(self, message: str = "Not authorized to access this resource", required_roles: list[str] | None = None):
        super().__init__(
            message=message,
            code="AUT301",
            status_code=403,
            details={"required_roles": required_roles} if required_roles else {},
        )
