"""Constants and Enums for Netatmo Away integration."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# Integration Domain
DOMAIN = "netatmo_away"

# Supported Platforms
PLATFORMS = ["switch"]

# Netatmo cloud endpoints
API_HOST = "api.netatmo.com"
API_BASE_URL = f"https://{API_HOST}"
TOKEN_PATH = "/oauth2/token"
HOMESTATUS_PATH = "/api/homestatus"
SETTHERMMODE_PATH = "/api/setthermmode"

TOKEN_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"

# Config entry data keys
CONF_CLIENT_ID = "client_id"
CONF_CLIENT_SECRET = "client_secret"
CONF_REFRESH_TOKEN = "refresh_token"
CONF_HOME_ID = "home_id"

# Options keys
CONF_CACHE_TTL = "cache_ttl"

# Device information shown in the device registry
DEVICE_MANUFACTURER = "Netatmo"
DEVICE_MODEL = "Energy"
DEVICE_NAME = "Netatmo Away"
SWITCH_NAME = "Absent"


class ThermMode(StrEnum):
    """Home-wide thermostat modes accepted by setthermmode.

    - SCHEDULE: rooms follow the regular weekly schedule
    - AWAY: rooms follow the away setpoint profile
    """

    SCHEDULE = "schedule"
    AWAY = "away"

    @classmethod
    def from_away(cls, away: bool) -> ThermMode:
        """Map the switch state to the mode sent to the API."""
        return cls.AWAY if away else cls.SCHEDULE


class APIDefaults(BaseModel):
    """Default values for API configuration.

    Immutable configuration values for caching, retries and polling.
    """

    model_config = {"frozen": True}

    CACHE_TTL: float = Field(
        default=120.0,
        description="Time-to-live in seconds of the cached away state",
    )
    MAX_CACHE_TTL: int = Field(default=3600, description="Upper bound accepted by the options flow")
    MAX_ATTEMPTS: int = Field(
        default=2,
        description="Attempts per logical call; the second one only follows a 401",
    )
    POLL_MARGIN: float = Field(
        default=1.0,
        description="Seconds added to the cache TTL so a scheduled poll never lands on a still-fresh entry",
    )
    MIN_UPDATE_INTERVAL: int = Field(default=30, description="Lower bound of the coordinator polling interval in seconds")


API_DEFAULTS = APIDefaults()
