"""Custom exceptions for Netatmo Away integration."""


class NetatmoAwayError(Exception):
    """Base exception for Netatmo Away."""


class AuthenticationError(NetatmoAwayError):
    """Raised when the token endpoint rejects the refresh token grant."""

    def __init__(self, body_text: str, status: int | None = None):
        super().__init__(body_text)
        self.body_text = body_text
        self.status = status


class ApiError(NetatmoAwayError):
    """Raised when a Netatmo API endpoint returns a non-2xx status."""

    def __init__(self, status: int, body_text: str):
        super().__init__(f"Netatmo API error (HTTP {status}): {body_text}")
        self.status = status
        self.body_text = body_text


class ParseError(NetatmoAwayError):
    """Raised when a response body does not have the expected shape."""
