"""
Rate limiting for the unauthenticated auth endpoints, keyed by client IP.

Every application builds its own ``Limiter`` from its settings; counters and
the on/off switch belong to that application only.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from franchise_saas.core.config import Settings

REGISTER_LIMIT = "5/minute"
LOGIN_LIMIT = "10/minute"
REFRESH_LIMIT = "10/minute"


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
