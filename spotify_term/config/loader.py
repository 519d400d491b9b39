"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

from spotify_term.config.schema import DEFAULT_REDIRECT_PORT, REDIRECT_URI_TEMPLATE, Config
from spotify_term.errors import ConfigError, ParseError
from spotify_term.utils.helpers import get_data_path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".spotify-term.config"
DEVELOPER_DASHBOARD_URL = "https://developer.spotify.com"

Prompt = Callable[[str, str | None], str]


def get_config_path() -> Path:
    """Get the config file path."""
    return get_data_path() / CONFIG_FILENAME


def load_config(config_path: Path | None = None) -> Config | None:
    """
    Load the config file without prompting.

    Returns None when the file is absent or empty.
    """
    path = config_path or get_config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    if not raw.strip():
        return None

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"Config file {path} must hold a JSON object")
    return Config.from_dict(data)


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file."""
    path = config_path or get_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to save config file {path}: {exc}") from exc
    logger.debug("Saved config to %s", path)


def _default_prompt(text: str, default: str | None) -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"{text}{suffix}: ").strip()
    return value or (default or "")


def load_or_create_config(
    on_prompt: Prompt | None = None,
    on_status: Callable[[str], None] | None = None,
    config_path: Path | None = None,
) -> Config:
    """
    Load the config, running first-time setup when it does not exist yet.

    Setup asks for the Spotify application's client ID and secret plus the
    port used for the authorization redirect, then prints the redirect URI
    that has to be registered on the application.
    """
    config = load_config(config_path)
    if config is not None:
        return config

    prompt = on_prompt or _default_prompt
    status = on_status or print

    status("Welcome to spotify-term, we need to perform some first time setup.")
    status(
        "Everything runs on your computer, so you need your own Spotify application. "
        f"Create one at {DEVELOPER_DASHBOARD_URL} and enter its settings below."
    )
    config = Config(
        client_id=prompt("Enter your client ID", None).strip(),
        client_secret=prompt("Enter your client secret", None).strip(),
        redirect_port=prompt(
            "Enter the desired port for the authorization redirect", DEFAULT_REDIRECT_PORT
        ).strip() or DEFAULT_REDIRECT_PORT,
    )
    save_config(config, config_path)
    status(
        "The setup is done. Don't forget to add the following URI to your "
        f"Spotify application's redirect URIs: {REDIRECT_URI_TEMPLATE.format(port=config.redirect_port)}"
    )
    return config
