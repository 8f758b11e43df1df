"""Exception hierarchy for the Kuna client.

Callers can catch ``KunaError`` for everything the library raises, or the
specific subclasses to tell configuration mistakes apart from network
failures.
"""

from __future__ import annotations

from typing import Optional


class KunaError(Exception):
    """Base class for all client errors."""


class ConfigurationError(KunaError):
    """Client is missing credentials or was given an invalid setting."""


class MalformedInputError(KunaError, ValueError):
    """A request could not be built from the given arguments."""


class TransportError(KunaError):
    """Network failure or non-2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body
        self.url = url


class MalformedResponseError(KunaError):
    """Response body could not be decoded."""

    def __init__(self, message: str, *, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.body = body
