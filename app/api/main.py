import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from app import metrics
from app.api.rate_limit import limiter
from app.api.routes_auth import router as auth_router
from app.api.routes_health import router as health_router
from app.api.routes_inventory import router as inventory_router
from app.api.routes_metrics import router as metrics_router
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logger import init_logging
from app.core.monitoring import init_monitoring
from app.db.base_class import Base
from app.db.session import engine
from app.models import inventory_models, models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)


async def _rate_limit_handler(request, exc: RateLimitExceeded):
    metrics.rate_limit_exceeded()
    return JSONResponse(
        status_code=429,
        content={"status": "error", "message": "Too many requests", "code": "RATE_LIMITED", "details": {}},
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):  # type: ignore[override]
        response = await call_next(request)
        response.headers.setdefault(
            "Strict-Transport-Security",
            f"max-age={settings.HSTS_SECONDS}; includeSubDomains; preload",
        )
        response.headers.setdefault("Referrer-Policy", "same-origin")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        return response


def create_app() -> FastAPI:
    init_logging()
    init_monitoring()

    # Interactive docs are disabled in production
    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    if is_production:
        app.add_middleware(HTTPSRedirectMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    register_error_handlers(app)

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")

    @app.get("/", tags=["meta"])
    def root() -> dict[str, str]:
        return {"message": settings.APP_NAME, "version": settings.APP_VERSION}

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(inventory_router, prefix="/api")
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(health_router)

    return app


app = create_app()
