"""Utility functions for spotify-term."""

import os
from pathlib import Path

DATA_PATH_ENV = "SPOTIFY_TERM_HOME"


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the directory holding the config and token files (defaults to ~)."""
    override = os.environ.get(DATA_PATH_ENV)
    if override:
        return ensure_dir(Path(override).expanduser())
    return Path.home()
