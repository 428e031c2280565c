"""Console settings read from the environment or ``config.ini``.

Each setting is looked up in an ``ADMIN_CONSOLE_*`` environment variable
first, then in the ``[console]`` section of ``config.ini`` at the project
root, and finally falls back to a built-in default::

    [console]
    base_url = https://example.com
    timeout = 15
    page_size = 100
    log_level = INFO
"""
from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from logic.pagination import DEFAULT_PAGE_SIZE
from utils.path_utils import get_base_dir

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "WARNING"

_SECTION = "console"


@dataclass(frozen=True)
class ConsoleSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    log_level: str = DEFAULT_LOG_LEVEL

    def with_overrides(self, **changes: Any) -> "ConsoleSettings":
        """Return a copy with every non-``None`` value in ``changes`` applied."""
        changes = {key: value for key, value in changes.items() if value is not None}
        if "base_url" in changes:
            changes["base_url"] = str(changes["base_url"]).rstrip("/")
        return replace(self, **changes)


def _read_config(config_path: Path) -> Optional[configparser.ConfigParser]:
    parser = configparser.ConfigParser()
    try:
        parser.read(config_path, encoding="utf-8")
    except configparser.Error as exc:
        log.warning("Ignoring unreadable %s: %s", config_path, exc)
        return None
    if not parser.has_section(_SECTION):
        return None
    return parser


def _lookup(
    parser: Optional[configparser.ConfigParser], env_name: str, option: str
) -> Optional[str]:
    value = os.getenv(env_name)
    if value and value.strip():
        return value.strip()
    if parser is not None:
        value = parser.get(_SECTION, option, fallback=None)
        if value and value.strip():
            return value.strip()
    return None


def _number(raw: Optional[str], cast, default, name: str):
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        log.warning("Invalid %s %r; using %s", name, raw, default)
        return default
    if value <= 0:
        log.warning("Non-positive %s %r; using %s", name, raw, default)
        return default
    return value


def load_settings(config_path: Optional[Path] = None) -> ConsoleSettings:
    """Resolve settings from the environment, ``config.ini`` and defaults."""

    if config_path is None:
        config_path = get_base_dir() / "config.ini"
    parser = _read_config(config_path)

    base_url = _lookup(parser, "ADMIN_CONSOLE_URL", "base_url") or DEFAULT_BASE_URL
    timeout = _number(
        _lookup(parser, "ADMIN_CONSOLE_TIMEOUT", "timeout"),
        float,
        DEFAULT_TIMEOUT,
        "timeout",
    )
    page_size = _number(
        _lookup(parser, "ADMIN_CONSOLE_PAGE_SIZE", "page_size"),
        int,
        DEFAULT_PAGE_SIZE,
        "page_size",
    )
    log_level = (
        _lookup(parser, "ADMIN_CONSOLE_LOG_LEVEL", "log_level") or DEFAULT_LOG_LEVEL
    ).upper()

    return ConsoleSettings(
        base_url=base_url.rstrip("/"),
        timeout=timeout,
        page_size=page_size,
        log_level=log_level,
    )


__all__ = ["ConsoleSettings", "DEFAULT_BASE_URL", "load_settings"]
