from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from atscore.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def _passthrough(func):
    return func


def rate_limit(limit: str | None = None):
    """Per-client limit for a route; a no-op when RATE_LIMIT_ENABLED is off."""
    if not settings.rate_limit_enabled:
        return _passthrough
    return limiter.limit(limit or settings.rate_limit)
