"""Infrastructure layer for Netatmo Away integration.

This package contains core infrastructure components:
- Error definitions
- Away state caching
"""

from .cache import DEFAULT_CACHE_TTL, AwayStateCache
from .errors import (
    ApiError,
    AuthenticationError,
    NetatmoAwayError,
    ParseError,
)

__all__ = [
    # Caching
    "AwayStateCache",
    "DEFAULT_CACHE_TTL",
    # Errors
    "NetatmoAwayError",
    "AuthenticationError",
    "ApiError",
    "ParseError",
]
