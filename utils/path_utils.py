from __future__ import annotations

import os
from pathlib import Path
import sys


def get_base_dir() -> Path:
    """Return project root or PyInstaller's temporary directory."""
    return Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent.parent))


def get_data_dir() -> Path:
    """Directory for persisted client state (``$ADMIN_CONSOLE_HOME`` wins)."""
    override = os.getenv("ADMIN_CONSOLE_HOME")
    if override:
        return Path(override).expanduser()
    if getattr(sys, "frozen", False):
        # The one-file bundle unpacks to a temp dir; keep state beside the exe.
        return Path(sys.executable).resolve().parent / "data"
    return get_base_dir() / "data"
