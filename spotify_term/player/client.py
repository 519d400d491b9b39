"""Spotify Web API playback client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from spotify_term.auth.flow import get_access_token
from spotify_term.errors import ApiError, NetworkError, ParseError
from spotify_term.player.models import CurrentlyPlaying, Device, parse_devices

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.spotify.com/v1"
API_REQUEST_TIMEOUT_SEC = 15.0


def _build_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "User-Agent": "spotify-term (python)",
        "Accept": "application/json",
    }


def _friendly_error(response: httpx.Response) -> str:
    message = ""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            message = error.get("message") or ""
        elif isinstance(error, str):
            message = payload.get("error_description") or error
    if response.status_code == 404 and not message:
        message = "No active device found"
    if response.status_code == 429:
        return "Spotify rate limit triggered. Please try again later."
    return f"HTTP {response.status_code}: {message or response.text or response.reason_phrase}"


class SpotifyClient:
    """Issues playback requests for one access token."""

    def __init__(self, access_token: str, api_base: str = DEFAULT_API_BASE):
        self.api_base = api_base.rstrip("/")
        self._http = httpx.Client(
            timeout=API_REQUEST_TIMEOUT_SEC,
            headers=_build_headers(access_token),
        )

    @classmethod
    def connect(cls, **auth_kwargs: Any) -> "SpotifyClient":
        """Fetch a fresh access token and return a client using it."""
        return cls(get_access_token(**auth_kwargs))

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "SpotifyClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, method: str, path: str) -> httpx.Response:
        url = f"{self.api_base}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self._http.request(method, url)
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} {path} failed: {exc}") from exc
        if not response.is_success:
            raise ApiError(_friendly_error(response), status_code=response.status_code)
        return response

    def _request_json(self, method: str, path: str) -> Any:
        response = self._request(method, path)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"Response from {path} is not valid JSON") from exc

    def resume(self) -> None:
        self._request("PUT", "/me/player/play")

    def pause(self) -> None:
        self._request("PUT", "/me/player/pause")

    def next_track(self) -> None:
        self._request("POST", "/me/player/next")

    def previous_track(self) -> None:
        self._request("POST", "/me/player/previous")

    def currently_playing(self) -> CurrentlyPlaying | None:
        payload = self._request_json("GET", "/me/player/currently-playing")
        if payload is None:
            return None
        return CurrentlyPlaying.from_payload(payload)

    def devices(self) -> list[Device]:
        payload = self._request_json("GET", "/me/player/devices")
        if payload is None:
            return []
        return parse_devices(payload)

    def me(self) -> str:
        """Return the raw profile body."""
        return self._request("GET", "/me").text
