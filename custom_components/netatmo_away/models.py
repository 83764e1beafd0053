"""Data models for Netatmo Away integration.

This module provides Pydantic models for the credentials handed to the
client and for the payloads returned by the Netatmo token and homestatus
endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from .constants import ThermMode
from .infrastructure.errors import ParseError


# Base model for all Netatmo Away data models
class NetatmoAwayModel(BaseModel):
    """Base model for all Netatmo Away data structures."""

    model_config = {"validate_assignment": True, "populate_by_name": True}


class Credentials(NetatmoAwayModel):
    """OAuth2 client credentials and the initial refresh token.

    Immutable input of the token manager. A rotated refresh token never
    mutates this object; the manager keeps the current value itself.

    Example:
        >>> creds = Credentials(
        ...     client_id="abc",
        ...     client_secret="secret",
        ...     refresh_token="5bff|refresh",
        ... )
        >>> creds.client_id
        'abc'
    """

    model_config = {"frozen": True}

    client_id: str = Field(..., min_length=1, description="Netatmo app client id")
    client_secret: str = Field(..., min_length=1, repr=False, description="Netatmo app client secret")
    refresh_token: str = Field(..., min_length=1, repr=False, description="Long-lived OAuth2 refresh token")


class TokenResponse(NetatmoAwayModel):
    """Response from the Netatmo OAuth2 token endpoint."""

    model_config = {"frozen": True, "extra": "allow"}

    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    expires_in: int | None = None
    scope: list[str] | None = None

    @classmethod
    def from_api(cls, response_data: Any) -> TokenResponse:
        """Validate the token endpoint payload."""
        try:
            return cls.model_validate(response_data)
        except ValidationError as e:
            raise ParseError(f"Unexpected token response: {e}") from e


class Room(NetatmoAwayModel):
    """A room entry of the homestatus payload."""

    model_config = {"extra": "allow"}

    id: str | int | None = None
    therm_setpoint_mode: str | None = None

    @property
    def is_away(self) -> bool:
        """Check if the room follows the away setpoint."""
        return ThermMode.AWAY.value in (self.therm_setpoint_mode or "")


class Home(NetatmoAwayModel):
    """The home object of the homestatus payload."""

    model_config = {"extra": "allow"}

    id: str | None = None
    rooms: list[Room] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_rooms(cls, v):
        # homes without thermostats report rooms as null or omit the key
        if isinstance(v, dict) and v.get("rooms") is None:
            v = {**v, "rooms": []}
        return v


class HomeStatusBody(NetatmoAwayModel):
    model_config = {"extra": "allow"}

    home: Home


class HomeStatus(NetatmoAwayModel):
    """Response model for /api/homestatus.

    ``body`` and ``body.home`` are required; a home without ``rooms`` is
    treated as having no rooms.

    Example:
        >>> HomeStatus.from_api(
        ...     {"body": {"home": {"rooms": [{"id": 1, "therm_setpoint_mode": "away"}]}}}
        ... ).is_away
        True
    """

    model_config = {"extra": "allow"}

    body: HomeStatusBody

    @property
    def rooms(self) -> list[Room]:
        return self.body.home.rooms

    @property
    def is_away(self) -> bool:
        """Check if any room of the home is in away mode."""
        return any(room.is_away for room in self.rooms)

    @classmethod
    def from_api(cls, response_data: Any) -> HomeStatus:
        """Build a home status from the raw API payload."""
        try:
            return cls.model_validate(response_data)
        except ValidationError as e:
            raise ParseError(f"Unexpected homestatus response: {e}") from e
