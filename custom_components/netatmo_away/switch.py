import logging

import aiohttp
from homeassistant.components.switch import SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .constants import (
    CONF_HOME_ID,
    DEVICE_MANUFACTURER,
    DEVICE_MODEL,
    DEVICE_NAME,
    DOMAIN,
    SWITCH_NAME,
)
from .coordinator import NetatmoAwayCoordinator
from .infrastructure.errors import NetatmoAwayError

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
):
    data = hass.data[DOMAIN][entry.entry_id]
    coordinator = data["coordinator"]

    async_add_entities([NetatmoAwaySwitch(coordinator, entry=entry)])


class NetatmoAwaySwitch(CoordinatorEntity[NetatmoAwayCoordinator], SwitchEntity):
    """Switch that is on while the Netatmo home is in away mode."""

    _attr_icon = "mdi:home-export-outline"

    def __init__(self, coordinator, entry):
        super().__init__(coordinator)
        self._entry = entry
        self._home_id = entry.data[CONF_HOME_ID]
        self._attr_config_entry_id = entry.entry_id
        self._attr_unique_id = f"{entry.entry_id}_switch_away"
        self._attr_name = SWITCH_NAME
        self._attr_has_entity_name = True

    @property
    def is_on(self):
        # Unknown until the first poll lands; answer fast with "not away"
        if self.coordinator.data is None:
            return False
        return self.coordinator.data

    @property
    def device_info(self) -> DeviceInfo:
        return DeviceInfo(
            identifiers={(DOMAIN, self._home_id)},
            name=DEVICE_NAME,
            manufacturer=DEVICE_MANUFACTURER,
            model=DEVICE_MODEL,
        )

    async def async_turn_on(self, **kwargs):
        await self._async_set_away(True)

    async def async_turn_off(self, **kwargs):
        await self._async_set_away(False)

    async def _async_set_away(self, away: bool):
        try:
            await self.coordinator.async_set_away(away)
        except (NetatmoAwayError, aiohttp.ClientError, TimeoutError) as e:
            _LOGGER.exception("Error setting away mode to %s", away)
            raise HomeAssistantError(f"Netatmo communication failure: {e}") from e
        _LOGGER.info("Set away mode %s", away)
