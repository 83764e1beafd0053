"""Common fixtures for Netatmo Away tests."""
import json

import pytest
from unittest.mock import AsyncMock, MagicMock
from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry

from custom_components.netatmo_away.models import Credentials

HOME_ID = "5bff18550f21e196648b4826"


@pytest.fixture
def mock_hass():
    """Create a mock Home Assistant instance."""
    hass = MagicMock(spec=HomeAssistant)
    hass.data = {}
    hass.loop = None
    hass.async_create_task = MagicMock()
    hass.add_job = MagicMock()
    return hass


@pytest.fixture
def mock_config_entry():
    """Create a mock config entry."""
    entry = MagicMock(spec=ConfigEntry)
    entry.entry_id = "test_entry_id"
    entry.data = {
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
        "refresh_token": "test-refresh-token",
        "home_id": HOME_ID,
    }
    entry.options = {}
    return entry


@pytest.fixture
def credentials():
    """Create test OAuth2 credentials."""
    return Credentials(
        client_id="test-client-id",
        client_secret="test-client-secret",
        refresh_token="test-refresh-token",
    )


@pytest.fixture
def mock_session():
    """Create a mock aiohttp session.

    ``post`` serves the token endpoint and ``request`` the API endpoints.
    """
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    return session


@pytest.fixture
def make_response():
    """Factory for an async context manager wrapping a mock aiohttp response."""

    def _make(status=200, json_data=None, text=None):
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        response = AsyncMock()
        response.status = status
        response.json = AsyncMock(return_value=json_data)
        response.text = AsyncMock(return_value=text)
        return AsyncMock(__aenter__=AsyncMock(return_value=response))

    return _make


@pytest.fixture
def token_body():
    """Token endpoint answer without refresh token rotation."""
    return {
        "access_token": "access-1",
        "refresh_token": "test-refresh-token",
        "expires_in": 10800,
        "scope": ["read_thermostat", "write_thermostat"],
    }


@pytest.fixture
def away_body():
    return {"body": {"home": {"rooms": [{"id": 1, "therm_setpoint_mode": "away"}]}}}


@pytest.fixture
def schedule_body():
    return {"body": {"home": {"rooms": [{"id": 1, "therm_setpoint_mode": "schedule"}]}}}


@pytest.fixture
def mock_api():
    """Create a mock NetatmoAwayAPI instance."""
    api = MagicMock()
    api.home_id = HOME_ID
    api.async_is_away = AsyncMock(return_value=False)
    api.async_set_away = AsyncMock()
    return api


@pytest.fixture
def mock_coordinator():
    """Create a mock coordinator."""
    coordinator = MagicMock()
    coordinator.data = False
    coordinator.async_set_away = AsyncMock()
    coordinator.async_request_refresh = AsyncMock()
    coordinator.async_add_listener = MagicMock(return_value=lambda: None)
    coordinator.last_update_success = True
    return coordinator
