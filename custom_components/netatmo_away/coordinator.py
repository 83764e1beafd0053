import logging
from datetime import timedelta

import aiohttp
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .constants import API_DEFAULTS
from .infrastructure.cache import DEFAULT_CACHE_TTL, AwayStateCache
from .infrastructure.errors import NetatmoAwayError

_LOGGER = logging.getLogger(__name__)


class NetatmoAwayCoordinator(DataUpdateCoordinator[bool]):
    """Polls the home away state through the read cache."""

    def __init__(self, hass, api, config_entry=None, cache_ttl: float = DEFAULT_CACHE_TTL):
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name="Netatmo Away",
            # HA truncates the poll time to whole seconds before adding its
            # sub-second offset; the margin keeps polls after cache expiry
            update_interval=timedelta(
                seconds=max(cache_ttl + API_DEFAULTS.POLL_MARGIN, API_DEFAULTS.MIN_UPDATE_INTERVAL)
            ),
        )
        self.api = api
        self.cache = AwayStateCache(ttl=cache_ttl)

    async def _async_update_data(self) -> bool:
        cached = self.cache.get()
        if cached is not None:
            return cached
        try:
            is_away = await self.api.async_is_away()
        except (NetatmoAwayError, aiohttp.ClientError, TimeoutError) as e:
            _LOGGER.warning("Error fetching Netatmo away state: %s", e)
            raise UpdateFailed(f"Error fetching Netatmo away state: {e}") from e
        self.cache.set(is_away)
        _LOGGER.info("Get away mode %s from API", is_away)
        return is_away

    async def async_set_away(self, away: bool) -> None:
        """Write the away state and publish it without waiting for a poll."""
        await self.api.async_set_away(away)
        self.cache.set(away)
        self.async_set_updated_data(away)
