import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .constants import (
    API_DEFAULTS,
    CONF_CACHE_TTL,
    CONF_CLIENT_ID,
    CONF_CLIENT_SECRET,
    CONF_HOME_ID,
    CONF_REFRESH_TOKEN,
    DOMAIN,
    PLATFORMS,
)
from .coordinator import NetatmoAwayCoordinator
from .models import Credentials
from .netatmo_api import NetatmoAwayAPI

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)

_LOGGER = logging.getLogger(__name__)


async def async_setup(hass: HomeAssistant, config: dict):
    return True  # configured through config entries only


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry):
    hass.data.setdefault(DOMAIN, {})

    @callback
    def _store_rotated_refresh_token(new_token: str) -> None:
        # The core only reports rotation; persisting it is our job
        _LOGGER.debug("Storing rotated Netatmo refresh token")
        hass.config_entries.async_update_entry(
            entry, data={**entry.data, CONF_REFRESH_TOKEN: new_token}
        )

    credentials = Credentials(
        client_id=entry.data[CONF_CLIENT_ID],
        client_secret=entry.data[CONF_CLIENT_SECRET],
        refresh_token=entry.data[CONF_REFRESH_TOKEN],
    )
    api = NetatmoAwayAPI(
        credentials,
        entry.data[CONF_HOME_ID],
        session=async_get_clientsession(hass),
        logger=_LOGGER,
        on_refresh_token_rotated=_store_rotated_refresh_token,
    )

    cache_ttl = entry.options.get(CONF_CACHE_TTL, API_DEFAULTS.CACHE_TTL)
    coordinator = NetatmoAwayCoordinator(hass, api, config_entry=entry, cache_ttl=cache_ttl)
    await coordinator.async_config_entry_first_refresh()

    hass.data[DOMAIN][entry.entry_id] = {
        "api": api,
        "coordinator": coordinator,
    }

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry):
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)
    return unload_ok


async def async_reload_entry(hass, entry):
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    cache_ttl = entry.options.get(CONF_CACHE_TTL, API_DEFAULTS.CACHE_TTL)
    if data is not None and data["coordinator"].cache.ttl == cache_ttl:
        # Data-only update such as a stored refresh token rotation
        return
    await hass.config_entries.async_reload(entry.entry_id)
