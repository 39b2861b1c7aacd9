import logging
import uuid

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import InventoryError

logger = logging.getLogger("app.errors")

_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def _error_body(message: str, **extra) -> dict:
    return {"status": "error", "message": message, **extra}


def _validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOCATION_PREFIXES]
        details.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return details


def register_error_handlers(app):
    @app.exception_handler(InventoryError)
    async def inventory_error(request: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error("Application error %s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=_error_body("Validation failed", errors=_validation_details(exc)),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(status_code=400, content=_error_body("A unique constraint violation occurred"))

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.warning("Database error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content=_error_body("Database operation failed"))

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):  # noqa: BLE001
        correlation_id = uuid.uuid4().hex
        logger.exception("Unhandled error cid=%s path=%s method=%s", correlation_id, request.url.path, request.method)
        return JSONResponse(status_code=500, content=_error_body("Internal server error", cid=correlation_id))

    return app
