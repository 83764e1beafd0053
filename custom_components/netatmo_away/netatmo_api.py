# netatmo_api.py
import json
import logging

import aiohttp

from .auth import RefreshTokenCallback, TokenManager
from .constants import (
    API_BASE_URL,
    API_DEFAULTS,
    HOMESTATUS_PATH,
    SETTHERMMODE_PATH,
    ThermMode,
)
from .infrastructure.errors import ApiError, ParseError
from .models import Credentials, HomeStatus

_LOGGER = logging.getLogger(__name__)

# One initial attempt plus one retry after re-authentication on 401
MAX_ATTEMPTS = API_DEFAULTS.MAX_ATTEMPTS


class NetatmoAwayAPI:
    """Bearer-authenticated client for the Netatmo Energy API.

    Every call injects the current access token. A 401 answer invalidates
    the token and the call is repeated exactly once with a fresh one; any
    other non-2xx answer, or a second 401, raises ApiError.
    """

    def __init__(
        self,
        credentials: Credentials | None,
        home_id: str,
        session: aiohttp.ClientSession | None = None,
        logger: logging.Logger | None = None,
        on_refresh_token_rotated: RefreshTokenCallback | None = None,
        base_url: str = API_BASE_URL,
        token_manager: TokenManager | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.home_id = home_id
        self._session = session
        self._owns_session = session is None
        self._logger = logger or _LOGGER
        if token_manager is None:
            if credentials is None:
                raise ValueError("credentials or token_manager required")
            token_manager = TokenManager(
                credentials,
                session=session,
                logger=logger,
                on_refresh_token_rotated=on_refresh_token_rotated,
                base_url=base_url,
            )
        self.token_manager = token_manager

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the aiohttp sessions this client created."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        await self.token_manager.close()

    async def _async_authenticated_request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
    ) -> str:
        """Make a bearer-authenticated request with one re-authentication retry.

        Args:
            method: HTTP method (GET, POST).
            path: API path appended to the base URL (e.g. "/api/homestatus").
            params: Query parameters.

        Returns:
            The body text of the successful (2xx) response.

        Raises:
            AuthenticationError: Token acquisition failed (not retried).
            ApiError: Non-2xx answer after the retry budget is spent.
        """
        url = self.base_url + path
        session = await self._get_session()

        for attempt in range(1, MAX_ATTEMPTS + 1):
            token = await self.token_manager.async_get_token()
            headers = {"Authorization": f"Bearer {token}"}

            self._logger.debug("[Attempt %d/%d] %s %s %s", attempt, MAX_ATTEMPTS, method, url, params)
            async with session.request(method, url, params=params, headers=headers) as response:
                status = response.status
                text = await response.text(errors="replace")

            if 200 <= status < 300:
                return text

            self._logger.warning("Netatmo %s %s returned HTTP %d", method, path, status)

            if status == 401 and attempt < MAX_ATTEMPTS:
                self._logger.warning("Got 401, refreshing token and retrying...")
                self.token_manager.invalidate(token)
                continue

            raise ApiError(status, text)

    async def async_get_home_status(self) -> HomeStatus:
        """Read the status of the configured home."""
        text = await self._async_authenticated_request(
            "GET", HOMESTATUS_PATH, params={"home_id": self.home_id}
        )
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ParseError(f"homestatus response is not JSON: {e}") from e
        self._logger.debug("API GET %s returned data: %s", HOMESTATUS_PATH, data)
        return HomeStatus.from_api(data)

    async def async_is_away(self) -> bool:
        """Check if any room of the home is in away mode."""
        status = await self.async_get_home_status()
        return status.is_away

    async def async_set_away(self, away: bool) -> None:
        """Switch the home between away and schedule mode."""
        mode = ThermMode.from_away(away)
        await self._async_authenticated_request(
            "POST",
            SETTHERMMODE_PATH,
            params={"home_id": self.home_id, "mode": mode.value},
        )
        self._logger.info("Netatmo home %s set to %s mode", self.home_id, mode.value)
