"""Build a standalone Data Admin Console executable using PyInstaller."""

from __future__ import annotations

import os
import PyInstaller.__main__


def main() -> None:
    """Run PyInstaller to create a standalone executable."""
    params = [
        "main.py",
        "--onefile",
        "--name",
        "DataAdminConsole",
        "--noconsole",
    ]
    # Ship the site's config.ini when one sits next to main.py
    if os.path.exists("config.ini"):
        params += ["--add-data", f"config.ini{os.pathsep}."]
    PyInstaller.__main__.run(params)


if __name__ == "__main__":
    main()
