import argparse
import logging
import os
import sys

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QApplication

from ui.console_window import ConsoleWindow
from ui.theme import DARK_QSS, LIGHT_QSS
from utils.config import load_settings
from utils.logging_setup import configure_logging

log = logging.getLogger(__name__)


def _show_window(window: ConsoleWindow, app: QApplication) -> None:
    """Present the console maximized while keeping Wayland stability."""
    platform = (QGuiApplication.platformName() or "").lower()
    session_type = os.environ.get("XDG_SESSION_TYPE", "").lower()

    if "wayland" in (platform, session_type):
        # Avoid an initial maximized show that can crash under fractional scaling
        screen = window.screen() or app.primaryScreen()
        if screen:
            window.setGeometry(screen.availableGeometry())
        window.show()

        def _maximize_after_show():
            window.setWindowState(window.windowState() | Qt.WindowState.WindowMaximized)
            window.raise_()
            window.activateWindow()

        QTimer.singleShot(0, _maximize_after_show)
        return

    window.showMaximized()
    window.raise_()
    window.activateWindow()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Schema-driven data admin console.")
    parser.add_argument("--base-url", help="Admin server URL (e.g., http://localhost:3000)")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--light", action="store_true", help="Start with the light theme")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = load_settings().with_overrides(
        base_url=args.base_url,
        log_level=args.log_level.upper() if args.log_level else None,
    )
    configure_logging(settings.log_level)
    log.info("Using admin server %s", settings.base_url)

    app = QApplication(sys.argv[:1])
    app.setStyleSheet(LIGHT_QSS if args.light else DARK_QSS)
    window = ConsoleWindow(settings)
    _show_window(window, app)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
