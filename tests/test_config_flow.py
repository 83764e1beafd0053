"""Tests for Netatmo Away config_flow."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from homeassistant import config_entries
from homeassistant.data_entry_flow import AbortFlow, FlowResultType

from custom_components.netatmo_away.config_flow import (
    DEFAULT_CACHE_TTL,
    NetatmoAwayConfigFlow,
    NetatmoAwayOptionsFlow,
)
from custom_components.netatmo_away.infrastructure.errors import (
    AuthenticationError,
    ParseError,
)

HOME_ID = "5bff18550f21e196648b4826"

USER_INPUT = {
    "client_id": "test-client-id",
    "client_secret": "test-client-secret",
    "refresh_token": "test-refresh-token",
    "home_id": HOME_ID,
}


def _make_flow():
    flow = NetatmoAwayConfigFlow()
    flow.hass = MagicMock()
    flow.context = {"source": config_entries.SOURCE_USER}
    flow.async_set_unique_id = AsyncMock()
    flow._abort_if_unique_id_configured = MagicMock()
    return flow


def _patch_session():
    mock_session = MagicMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    return patch("aiohttp.ClientSession", return_value=mock_session)


def _patch_token_manager(refresh_token="test-refresh-token", side_effect=None):
    manager = MagicMock()
    manager.refresh_token = refresh_token
    manager.async_acquire = AsyncMock(return_value="access-1", side_effect=side_effect)
    return patch(
        "custom_components.netatmo_away.config_flow.TokenManager",
        return_value=manager,
    )


@pytest.mark.asyncio
async def test_user_flow_shows_form():
    """Test the user step shows a form without input."""
    flow = _make_flow()

    result = await flow.async_step_user(user_input=None)

    assert result["type"] == FlowResultType.FORM
    assert result["step_id"] == "user"
    assert result["errors"] == {}


@pytest.mark.asyncio
async def test_user_flow_success():
    """Test successful user configuration flow."""
    flow = _make_flow()

    with _patch_session(), _patch_token_manager() as mock_manager_class:
        result = await flow.async_step_user(user_input=dict(USER_INPUT))

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["title"] == f"Netatmo Away ({HOME_ID})"
    assert result["data"] == USER_INPUT
    flow.async_set_unique_id.assert_awaited_once_with(HOME_ID)
    credentials = mock_manager_class.call_args[0][0]
    assert credentials.client_id == "test-client-id"


@pytest.mark.asyncio
async def test_user_flow_strips_input():
    """Test pasted values are stripped before use."""
    flow = _make_flow()
    user_input = {key: f" {value} " for key, value in USER_INPUT.items()}

    with _patch_session(), _patch_token_manager():
        result = await flow.async_step_user(user_input=user_input)

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["data"] == USER_INPUT


@pytest.mark.asyncio
async def test_user_flow_stores_rotated_refresh_token():
    """Test a refresh token rotated during validation is the one stored."""
    flow = _make_flow()

    with _patch_session(), _patch_token_manager(refresh_token="rotated-refresh-token"):
        result = await flow.async_step_user(user_input=dict(USER_INPUT))

    assert result["data"]["refresh_token"] == "rotated-refresh-token"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,expected",
    [
        (AuthenticationError('{"error":"invalid_grant"}', status=400), "invalid_auth"),
        (ParseError("no access_token"), "invalid_response"),
        (TimeoutError(), "cannot_connect"),
    ],
)
async def test_user_flow_token_errors(error, expected):
    """Test token acquisition failures map to form errors."""
    flow = _make_flow()

    with _patch_session(), _patch_token_manager(side_effect=error):
        result = await flow.async_step_user(user_input=dict(USER_INPUT))

    assert result["type"] == FlowResultType.FORM
    assert result["errors"] == {"base": expected}


@pytest.mark.asyncio
async def test_user_flow_invalid_home_id():
    """Test a malformed home id is rejected before any request."""
    flow = _make_flow()

    with _patch_session() as mock_session_class, _patch_token_manager():
        result = await flow.async_step_user(user_input={**USER_INPUT, "home_id": "my-home"})

    assert result["type"] == FlowResultType.FORM
    assert result["errors"] == {"home_id": "invalid_home_id"}
    mock_session_class.assert_not_called()


@pytest.mark.asyncio
async def test_user_flow_invalid_credential():
    """Test an empty credential is rejected."""
    flow = _make_flow()

    result = await flow.async_step_user(user_input={**USER_INPUT, "client_secret": "   "})

    assert result["type"] == FlowResultType.FORM
    assert result["errors"] == {"client_secret": "invalid_credential"}


@pytest.mark.asyncio
async def test_user_flow_already_configured():
    """Test a home can only be configured once."""
    flow = _make_flow()
    flow._abort_if_unique_id_configured = MagicMock(side_effect=AbortFlow("already_configured"))

    with pytest.raises(AbortFlow):
        await flow.async_step_user(user_input=dict(USER_INPUT))


@pytest.mark.asyncio
async def test_options_flow_default_values():
    """Test options flow shows the cache TTL form."""
    entry = MagicMock()
    entry.options = {}

    flow = NetatmoAwayOptionsFlow(entry)

    result = await flow.async_step_init(user_input=None)

    assert result["type"] == FlowResultType.FORM
    assert result["step_id"] == "init"
    assert DEFAULT_CACHE_TTL == 120


@pytest.mark.asyncio
async def test_options_flow_saves_cache_ttl():
    """Test a valid cache TTL is saved."""
    entry = MagicMock()
    entry.options = {}

    flow = NetatmoAwayOptionsFlow(entry)

    result = await flow.async_step_init(user_input={"cache_ttl": 60})

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["data"] == {"cache_ttl": 60}


@pytest.mark.asyncio
async def test_options_flow_rejects_cache_ttl():
    """Test an out of range cache TTL shows an error."""
    entry = MagicMock()
    entry.options = {"cache_ttl": 120}

    flow = NetatmoAwayOptionsFlow(entry)

    result = await flow.async_step_init(user_input={"cache_ttl": 7200})

    assert result["type"] == FlowResultType.FORM
    assert result["errors"] == {"cache_ttl": "invalid_cache_ttl"}
