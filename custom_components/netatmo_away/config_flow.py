import logging

import aiohttp
import voluptuous as vol

from homeassistant.config_entries import ConfigEntry, ConfigFlow, OptionsFlow

from .auth import TokenManager
from .constants import (
    API_DEFAULTS,
    CONF_CACHE_TTL,
    CONF_CLIENT_ID,
    CONF_CLIENT_SECRET,
    CONF_HOME_ID,
    CONF_REFRESH_TOKEN,
    DOMAIN,
)
from .infrastructure.errors import AuthenticationError, ParseError
from .models import Credentials
from .validators import validate_cache_ttl, validate_credential, validate_home_id

_LOGGER = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = int(API_DEFAULTS.CACHE_TTL)


class NetatmoAwayConfigFlow(ConfigFlow, domain=DOMAIN):
    VERSION = 1

    async def async_step_user(self, user_input=None):
        errors = {}

        if user_input is not None:
            user_input = {key: value.strip() for key, value in user_input.items()}
            home_id = user_input[CONF_HOME_ID]

            is_valid, error = validate_home_id(home_id)
            if not is_valid:
                _LOGGER.debug("Rejected home id %r: %s", home_id, error)
                errors[CONF_HOME_ID] = "invalid_home_id"
            for key in (CONF_CLIENT_ID, CONF_CLIENT_SECRET, CONF_REFRESH_TOKEN):
                is_valid, _ = validate_credential(user_input[key])
                if not is_valid:
                    errors[key] = "invalid_credential"

            if not errors:
                await self.async_set_unique_id(home_id)
                self._abort_if_unique_id_configured()

                credentials = Credentials(
                    client_id=user_input[CONF_CLIENT_ID],
                    client_secret=user_input[CONF_CLIENT_SECRET],
                    refresh_token=user_input[CONF_REFRESH_TOKEN],
                )
                try:
                    async with aiohttp.ClientSession() as session:
                        manager = TokenManager(credentials, session=session)
                        await manager.async_acquire()
                except AuthenticationError:
                    _LOGGER.warning("Netatmo rejected the refresh token")
                    errors["base"] = "invalid_auth"
                except ParseError:
                    _LOGGER.exception("Unexpected answer from the Netatmo token endpoint")
                    errors["base"] = "invalid_response"
                except (TimeoutError, aiohttp.ClientError):
                    errors["base"] = "cannot_connect"
                else:
                    # Validation may already have rotated the refresh token
                    return self.async_create_entry(
                        title=f"Netatmo Away ({home_id})",
                        data={**user_input, CONF_REFRESH_TOKEN: manager.refresh_token},
                    )

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_CLIENT_ID): str,
                    vol.Required(CONF_CLIENT_SECRET): str,
                    vol.Required(CONF_REFRESH_TOKEN): str,
                    vol.Required(CONF_HOME_ID): str,
                }
            ),
            errors=errors,
        )

    @classmethod
    def async_get_options_flow(cls, entry: ConfigEntry):
        return NetatmoAwayOptionsFlow(entry)


class NetatmoAwayOptionsFlow(OptionsFlow):
    def __init__(self, entry):
        self.entry = entry

    async def async_step_init(self, user_input=None):
        errors = {}

        if user_input is not None:
            is_valid, _ = validate_cache_ttl(user_input[CONF_CACHE_TTL])
            if is_valid:
                return self.async_create_entry(title="", data=user_input)
            errors[CONF_CACHE_TTL] = "invalid_cache_ttl"

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Optional(
                        CONF_CACHE_TTL,
                        default=self.entry.options.get(CONF_CACHE_TTL, DEFAULT_CACHE_TTL),
                    ): vol.Coerce(int),
                }
            ),
            errors=errors,
        )
