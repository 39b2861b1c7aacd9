import logging

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

logger = logging.getLogger(__name__)

# In-memory counters are per process; use a shared backend URI for multi-worker deployments.
limiter = Limiter(key_func=get_remote_address, storage_uri=settings.RATE_LIMIT_STORAGE_URI)
logger.info("Rate limiter storage: %s", settings.RATE_LIMIT_STORAGE_URI.split("://", 1)[0])


def auth_rate_limit(key: str) -> str:
    """Per-client limit for login and register, read from settings on each request."""
    return settings.AUTH_RATE_LIMIT


RATE_LIMITS = {
    "login": auth_rate_limit,
    "register": auth_rate_limit,
}
