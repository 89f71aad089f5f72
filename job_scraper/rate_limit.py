"""
IP-based rate limiting for /api endpoints.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from job_scraper.config import Settings

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def build_limiter(settings: Settings) -> Limiter:
    """One limiter per app, so counters are never shared between app instances."""
    return Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
