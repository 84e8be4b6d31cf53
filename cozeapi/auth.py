"""Sources of access tokens for API requests."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Auth(ABC):
    """Something that supplies an access token."""

    @abstractmethod
    def token(self) -> str:
        """Return the access token to send with a request."""


class TokenAuth(Auth):
    """A fixed access token."""

    def __init__(self, access_token: str) -> None:
        self._access_token = access_token

    def token(self) -> str:
        return self._access_token


def get_refresh_before(ttl: int) -> int:
    """Seconds before expiry at which a token with this TTL should be refreshed."""
    if ttl >= 600:
        return 30
    if ttl >= 60:
        return 10
    if ttl >= 30:
        return 5
    return 0