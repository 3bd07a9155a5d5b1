"""Shared rate limiter instance for use across route files.

The limiter is process-wide; ``create_app`` applies its settings through
``configure_limiter``. Route limits are read on every request, so the last
configured ``auth_rate_limit`` is the one enforced.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from cafe.core.config import Settings, settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

_auth_rate_limit = settings.auth_rate_limit


def auth_rate_limit() -> str:
    """Limit applied to login and register."""
    return _auth_rate_limit


def configure_limiter(app_settings: Settings) -> None:
    global _auth_rate_limit
    limiter.enabled = app_settings.rate_limit_enabled
    _auth_rate_limit = app_settings.auth_rate_limit
