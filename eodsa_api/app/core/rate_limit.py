"""
Per-client rate limiting for the public registration routes.

The limiter keeps its counters in process memory (slowapi's default
storage), so limits are per server process and reset on restart.  A
deployment running several instances should point slowapi at a shared
storage backend instead.  The limit string is read from settings on
every request so it can be tuned without re-decorating the routes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings


limiter = Limiter(key_func=get_remote_address)


def registration_limit() -> str:
    """Current registration limit, e.g. ``"3/hour"``."""
    return settings.registration_rate_limit
