"""API-key authentication for routes that require it."""

from __future__ import annotations

from typing import Iterable, Mapping

from ..._routing.definitions import AuthPolicy
from ..._routing.errors import AuthenticationError

__all__ = ["ApiKeyAuthenticator", "parse_api_keys"]


def parse_api_keys(raw: str | None) -> frozenset[str]:
    """Split a comma separated key list, dropping blank entries."""

    if not raw:
        return frozenset()
    return frozenset(key.strip() for key in raw.split(",") if key.strip())


class ApiKeyAuthenticator:
    """Checks a request header against a fixed set of API keys."""

    __slots__ = ("_api_keys",)

    def __init__(self, api_keys: Iterable[str] = ()) -> None:
        self._api_keys = frozenset(api_keys)

    @property
    def api_keys(self) -> frozenset[str]:
        return self._api_keys

    def authenticate(self, policy: AuthPolicy, headers: Mapping[str, str]) -> None:
        if not policy.required:
            return
        if not self._api_keys:
            raise AuthenticationError(
                "API keys must be configured when authentication is enabled"
            )
        provided = headers.get(policy.header)
        if not provided:
            raise AuthenticationError(f"Missing required header: {policy.header}")
        if provided not in self._api_keys:
            raise AuthenticationError("Invalid API key")
