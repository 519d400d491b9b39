"""Token storage helpers."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from spotify_term.auth.constants import TOKEN_FILENAME
from spotify_term.auth.models import TokenRecord
from spotify_term.errors import ParseError, PersistenceError
from spotify_term.utils.helpers import get_data_path

logger = logging.getLogger(__name__)


def get_token_path() -> Path:
    return get_data_path() / TOKEN_FILENAME


def load_token_file(path: Path | None = None) -> TokenRecord | None:
    """Load the stored token record; None when nothing has been stored yet."""
    path = path or get_token_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise PersistenceError(f"Failed to read token file {path}: {exc}") from exc

    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Token file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"Token file {path} must hold a JSON object")
    return TokenRecord.from_dict(data)


def save_token_file(token: TokenRecord, path: Path | None = None) -> None:
    path = path or get_token_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(token.to_dict(), ensure_ascii=True, indent=2),
            encoding="utf-8",
        )
    except OSError as exc:
        raise PersistenceError(f"Failed to write token file {path}: {exc}") from exc
    try:
        os.chmod(path, 0o600)
    except OSError:
        # Ignore permission setting failures.
        pass
    logger.debug("Saved token record to %s", path)


class FileLock:
    """Advisory file lock serializing token refreshes across processes."""

    def __init__(self, path: Path):
        self._path = path
        self._fp = None

    def __enter__(self) -> "FileLock":
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fp = open(self._path, "a+")
        try:
            import fcntl

            fcntl.flock(self._fp.fileno(), fcntl.LOCK_EX)
        except (ImportError, OSError):
            # Non-POSIX or failed lock: continue without locking.
            pass
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            import fcntl

            fcntl.flock(self._fp.fileno(), fcntl.LOCK_UN)
        except (ImportError, OSError):
            pass
        if self._fp:
            self._fp.close()
            self._fp = None
