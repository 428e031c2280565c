"""Persisted admin token for the console session."""
from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Optional

from utils.path_utils import get_data_dir

log = logging.getLogger(__name__)

TOKEN_KEY = "ADMIN_TOKEN"
_SECTION = "session"


def default_session_path() -> Path:
    return get_data_dir() / "session.ini"


class SessionStore:
    """Holds the optional admin token and mirrors it to an INI file.

    The token is never checked locally. A wrong token only shows up when the
    server rejects the first authenticated call.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_session_path()
        self._token: Optional[str] = None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "SessionStore":
        store = cls(path)
        store._token = store._read()
        return store

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, value: str) -> None:
        """Activate ``value`` and persist it; a blank value signs out."""

        token = (value or "").strip()
        if not token:
            self.clear()
            return
        self._token = token
        self._write(token)

    def clear(self) -> None:
        self._token = None
        self._write(None)

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str  # keep the key's case
        try:
            parser.read(self.path, encoding="utf-8")
        except configparser.Error as exc:
            log.warning("Ignoring corrupt session file %s: %s", self.path, exc)
            return None
        token = parser.get(_SECTION, TOKEN_KEY, fallback="").strip()
        return token or None

    def _write(self, token: Optional[str]) -> None:
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str
        parser[_SECTION] = {}
        if token is not None:
            parser[_SECTION][TOKEN_KEY] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            parser.write(fh)


__all__ = ["SessionStore", "TOKEN_KEY", "default_session_path"]
