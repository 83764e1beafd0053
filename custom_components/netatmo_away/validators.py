"""Input validation for Netatmo Away integration.

This module provides validation functions for the values entered in the
config and options flows:
- Home ids (24 hex digit object ids)
- Client ids, secrets and tokens (non-empty, no whitespace)
- Cache TTL (range validation)

Each validator returns ``(is_valid, error_message)``.
"""

from __future__ import annotations

import re

from .constants import API_DEFAULTS

_HOME_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def validate_home_id(home_id: str) -> tuple[bool, str | None]:
    """Validate a Netatmo home id.

    Netatmo home ids are MongoDB object ids: 24 hexadecimal characters.

    Args:
        home_id: Home id to validate.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid, otherwise contains description of the error.

    Example:
        >>> validate_home_id("5bff18550f21e196648b4826")
        (True, None)
        >>> validate_home_id("my-home")
        (False, "Home id must be 24 hexadecimal characters")
    """
    home_id = home_id.strip()

    if not home_id:
        return False, "Home id cannot be empty"

    if not _HOME_ID_PATTERN.match(home_id):
        return False, "Home id must be 24 hexadecimal characters"

    return True, None


def validate_credential(value: str) -> tuple[bool, str | None]:
    """Validate a client id, client secret or refresh token.

    Example:
        >>> validate_credential("5bff|abc")
        (True, None)
        >>> validate_credential("abc def")
        (False, "Value must not contain whitespace")
    """
    value = value.strip()

    if not value:
        return False, "Value cannot be empty"

    if re.search(r"\s", value):
        return False, "Value must not contain whitespace"

    return True, None


def validate_cache_ttl(ttl: int | float) -> tuple[bool, str | None]:
    """Validate the away state cache TTL in seconds.

    Zero disables the cache.

    Example:
        >>> validate_cache_ttl(120)
        (True, None)
        >>> validate_cache_ttl(-1)
        (False, "Cache TTL must be between 0 and 3600 seconds")
    """
    if not 0 <= ttl <= API_DEFAULTS.MAX_CACHE_TTL:
        return False, f"Cache TTL must be between 0 and {API_DEFAULTS.MAX_CACHE_TTL} seconds"

    return True, None
