"""Domain errors.

One taxonomy for everything that can go wrong talking to the backend:
callers never branch on network vs 4xx vs 5xx vs parse failures.
"""

from __future__ import annotations


class LexideckError(Exception):
    """Base class for application errors."""


class ConfigurationError(LexideckError):
    """Required configuration is missing or invalid."""


class RequestFailedError(LexideckError):
    """A backend request failed (transport, non-2xx or unparseable body)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(RequestFailedError):
    """Sign-in was rejected by the backend."""
