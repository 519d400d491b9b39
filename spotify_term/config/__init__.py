"""Configuration module for spotify-term."""

from spotify_term.config.loader import (
    get_config_path,
    load_config,
    load_or_create_config,
    save_config,
)
from spotify_term.config.schema import Config

__all__ = [
    "Config",
    "get_config_path",
    "load_config",
    "load_or_create_config",
    "save_config",
]
