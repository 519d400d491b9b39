"""Spotify Web API playback client."""

from spotify_term.player.client import SpotifyClient
from spotify_term.player.models import CurrentlyPlaying, Device

__all__ = ["CurrentlyPlaying", "Device", "SpotifyClient"]
