"""Exceptions raised by spotify-term."""

from __future__ import annotations


class SpotifyTermError(Exception):
    """Base exception for every error the CLI reports to the user."""


class ConfigError(SpotifyTermError):
    """Raised when the config file cannot be read or holds unusable values."""


class ParseError(SpotifyTermError):
    """Raised when a stored file or a response body is not the expected JSON."""


class PersistenceError(SpotifyTermError):
    """Raised when the token file cannot be written."""


class AuthError(SpotifyTermError):
    """Raised when authorization or a token exchange fails."""


class MissingCodeError(AuthError):
    """Raised when the redirect callback carries no authorization code."""


class AuthorizationTimedOut(AuthError):
    """Raised when the user does not complete the browser flow in time."""


class NetworkError(SpotifyTermError):
    """Raised on transport-level HTTP failures."""


class ApiError(SpotifyTermError):
    """Raised when the Web API answers with a non-2xx status.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code from the API response
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
