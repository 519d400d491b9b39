"""Narrow views of the Web API responses the CLI reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from spotify_term.errors import ParseError


@dataclass
class CurrentlyPlaying:
    """Track currently playing on the user's active device."""

    track_name: str
    artist_name: str

    @classmethod
    def from_payload(cls, payload: Any) -> "CurrentlyPlaying | None":
        """Decode ``/me/player/currently-playing``; None when nothing plays."""
        if not isinstance(payload, dict):
            raise ParseError("Currently playing response must be a JSON object")
        item = payload.get("item")
        if not item:
            return None
        if not isinstance(item, dict):
            raise ParseError("Currently playing item must be a JSON object")

        if item.get("type") == "episode":
            # Podcast episodes carry the show instead of artists.
            show = item.get("show") or {}
            if not isinstance(show, dict):
                raise ParseError("Episode show must be a JSON object")
            artist = show.get("name") or "Unknown Show"
        else:
            artists = item.get("artists") or []
            if not isinstance(artists, list):
                raise ParseError("Track artists must be a list")
            first = artists[0] if artists else {}
            if not isinstance(first, dict):
                raise ParseError("Track artist must be a JSON object")
            artist = first.get("name") or "Unknown Artist"

        return cls(
            track_name=item.get("name") or "Unknown Track",
            artist_name=artist,
        )

    def describe(self) -> str:
        return f"Now playing: {self.track_name} by {self.artist_name}"


@dataclass
class Device:
    """Spotify Connect device."""

    id: str
    name: str
    type: str
    volume_percent: int | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Device":
        if not isinstance(payload, dict):
            raise ParseError("Device entry must be a JSON object")
        volume = payload.get("volume_percent")
        return cls(
            id=str(payload.get("id") or ""),
            name=str(payload.get("name") or ""),
            type=str(payload.get("type") or ""),
            volume_percent=volume if isinstance(volume, int) else None,
        )

    def describe(self) -> str:
        volume = f"{self.volume_percent}%" if self.volume_percent is not None else "-"
        return f"{self.name}  {self.type}  {volume}  {self.id}"


def parse_devices(payload: Any) -> list[Device]:
    """Decode ``/me/player/devices``."""
    if not isinstance(payload, dict):
        raise ParseError("Devices response must be a JSON object")
    devices = payload.get("devices") or []
    if not isinstance(devices, list):
        raise ParseError("Devices response field 'devices' must be a list")
    return [Device.from_payload(entry) for entry in devices]
