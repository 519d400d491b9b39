"""Spotify OAuth data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class TokenRecord:
    """Token endpoint response as persisted in the token file."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    scope: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any], refresh_token: str | None = None) -> "TokenRecord":
        """
        Build a record from a token endpoint payload.

        ``refresh_token`` fills in for a payload that omits it, which is what
        the provider does on most refresh grants.
        """
        expires_in = payload.get("expires_in")
        return cls(
            access_token=str(payload.get("access_token") or ""),
            refresh_token=str(payload.get("refresh_token") or refresh_token or ""),
            token_type=str(payload.get("token_type") or "Bearer"),
            expires_in=expires_in if isinstance(expires_in, int) else 0,
            scope=str(payload.get("scope") or ""),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenRecord":
        """Rebuild a stored record exactly as it was saved."""
        return cls(
            access_token=data.get("access_token", ""),
            refresh_token=data.get("refresh_token", ""),
            token_type=data.get("token_type", ""),
            expires_in=data.get("expires_in", 0),
            scope=data.get("scope", ""),
        )

    def is_complete(self) -> bool:
        return bool(self.access_token and self.refresh_token)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
