"""OAuth2 token handling for the Netatmo cloud API.

The manager exchanges the refresh token for a bearer access token and
keeps that token in memory until it is invalidated. Token expiry is not
tracked; a 401 from the API is the signal that the token went stale.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import aiohttp

from .constants import API_BASE_URL, API_HOST, TOKEN_CONTENT_TYPE, TOKEN_PATH
from .models import Credentials, TokenResponse
from .infrastructure.errors import AuthenticationError, ParseError

_LOGGER = logging.getLogger(__name__)

RefreshTokenCallback = Callable[[str], None]


def _redact(token: str | None) -> str:
    if not token:
        return "<none>"
    return f"{token[:4]}…"


class TokenManager:
    """Manages the OAuth2 access token for the Netatmo API.

    At most one access token is held at a time. Acquisition is serialized
    behind a lock so concurrent callers waiting for a token share a single
    refresh token grant; Netatmo rotates refresh tokens, and two parallel
    grants would race on the rotation.

    Attributes:
        credentials: Client id/secret and the initial refresh token.
        base_url: Scheme and host of the Netatmo cloud.
    """

    def __init__(
        self,
        credentials: Credentials,
        session: aiohttp.ClientSession | None = None,
        logger: logging.Logger | None = None,
        on_refresh_token_rotated: RefreshTokenCallback | None = None,
        base_url: str = API_BASE_URL,
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._logger = logger or _LOGGER
        self._on_refresh_token_rotated = on_refresh_token_rotated
        self._refresh_token = credentials.refresh_token
        self._access_token: str | None = None
        self._lock = asyncio.Lock()

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def refresh_token(self) -> str:
        """The refresh token currently in use (rotated value if any)."""
        return self._refresh_token

    @property
    def has_token(self) -> bool:
        return self._access_token is not None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session if this manager created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def async_get_token(self) -> str:
        """Return the held access token, acquiring one if none is held.

        Returns:
            A bearer token that is valid until proven otherwise.

        Raises:
            AuthenticationError: The token endpoint rejected the grant.
            ParseError: The token endpoint answered 2xx without a token.
        """
        async with self._lock:
            if self._access_token is not None:
                return self._access_token
            return await self._async_request_token()

    async def async_acquire(self) -> str:
        """Request a fresh access token with the refresh token grant.

        Always performs a network round trip. No retry happens here; the
        retry policy belongs to the caller.
        """
        async with self._lock:
            return await self._async_request_token()

    def invalidate(self, token: str | None = None) -> None:
        """Drop the held access token.

        Args:
            token: The token the caller saw rejected. If another caller has
                already replaced it with a fresh one, nothing is dropped.
        """
        if token is not None and token != self._access_token:
            self._logger.debug("Stale token already replaced, keeping current one")
            return
        if self._access_token is not None:
            self._logger.debug("Invalidating Netatmo access token")
        self._access_token = None

    async def _async_request_token(self) -> str:
        url = self.base_url + TOKEN_PATH
        payload = {
            "grant_type": "refresh_token",
            "refresh_token": self._refresh_token,
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
        }
        headers = {"Host": API_HOST, "Content-Type": TOKEN_CONTENT_TYPE}

        self._logger.debug("Requesting Netatmo access token from %s", url)
        session = await self._get_session()
        async with session.post(url, data=payload, headers=headers) as response:
            if not 200 <= response.status < 300:
                text = await response.text(errors="replace")
                self._logger.warning("Netatmo token request failed with HTTP %d", response.status)
                raise AuthenticationError(text, status=response.status)
            try:
                data = await response.json(content_type=None)
            except (aiohttp.ContentTypeError, ValueError) as e:
                raise ParseError(f"Token response is not JSON: {e}") from e

        token_data = TokenResponse.from_api(data)
        self._access_token = token_data.access_token
        self._logger.info("Netatmo authentication ok, token %s", _redact(token_data.access_token))

        rotated = token_data.refresh_token
        if rotated and rotated != self._refresh_token:
            self._refresh_token = rotated
            self._logger.info("Netatmo refresh token rotated")
            if self._on_refresh_token_rotated is not None:
                self._on_refresh_token_rotated(rotated)

        return self._access_token
