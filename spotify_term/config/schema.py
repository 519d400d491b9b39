"""Configuration schema."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from spotify_term.errors import ConfigError

DEFAULT_REDIRECT_PORT = "5958"
REDIRECT_URI_TEMPLATE = "http://localhost:{port}/callback"


@dataclass
class Config:
    """Spotify application credentials and the local redirect port."""

    client_id: str = ""
    client_secret: str = ""
    redirect_port: str = DEFAULT_REDIRECT_PORT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls(
            client_id=str(data.get("client_id") or ""),
            client_secret=str(data.get("client_secret") or ""),
            redirect_port=str(data.get("redirect_port") or ""),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @property
    def port(self) -> int:
        """Redirect port as an integer."""
        try:
            port = int(self.redirect_port)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid redirect port: {self.redirect_port!r}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"Redirect port out of range: {port}")
        return port

    @property
    def redirect_uri(self) -> str:
        return REDIRECT_URI_TEMPLATE.format(port=self.port)
