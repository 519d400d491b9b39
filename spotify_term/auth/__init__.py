"""Spotify OAuth: browser authorization, token exchange and storage."""

from spotify_term.auth.flow import authorize, get_access_token, get_token
from spotify_term.auth.models import TokenRecord

__all__ = [
    "TokenRecord",
    "authorize",
    "get_access_token",
    "get_token",
]
