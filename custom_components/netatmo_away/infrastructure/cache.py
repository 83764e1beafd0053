"""Short-lived cache of the home away state.

Home Assistant expects entity state reads to answer immediately, while a
homestatus round trip to the Netatmo cloud can take seconds. The cache
keeps the last known away state for a fixed TTL so reads inside that
window never touch the network.
"""

import asyncio
import logging

from ..constants import API_DEFAULTS

_LOGGER = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = API_DEFAULTS.CACHE_TTL


class AwayStateCache:
    """TTL cache holding a single away-mode entry.

    Attributes:
        ttl: Cache time-to-live in seconds (0 = disabled)
    """

    def __init__(self, ttl: float = DEFAULT_CACHE_TTL):
        self.ttl = ttl
        # (mode, expires_at) in event loop time
        self._entry: tuple[bool, float] | None = None

    def _get_current_time(self) -> float:
        """Get current monotonic time of the event loop."""
        return asyncio.get_event_loop().time()

    @property
    def expires_at(self) -> float | None:
        return self._entry[1] if self._entry else None

    def get(self) -> bool | None:
        """Get the cached away state if it's still valid.

        Returns:
            Cached away state or None if not found/expired
        """
        if self._entry is None:
            return None
        mode, expires_at = self._entry
        if self._get_current_time() < expires_at:
            _LOGGER.debug("Away state cache hit: %s", mode)
            return mode
        # Cache expired, remove it
        self._entry = None
        return None

    def set(self, mode: bool) -> None:
        """Store the away state with an expiry of now + ttl."""
        if self.ttl <= 0:
            return
        self._entry = (bool(mode), self._get_current_time() + self.ttl)

    def invalidate(self) -> None:
        """Drop the cached away state."""
        self._entry = None
        _LOGGER.debug("Away state cache invalidated")
