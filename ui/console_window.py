from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QStackedWidget,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from services import model_console as mc
from services.admin_api import AdminApiClient
from services.model_console import ModelConsole
from utils.config import ConsoleSettings, load_settings
from utils.session_store import SessionStore

from .context import ConsoleContext, Dispatch, Worker
from .dispatch import UiDispatcher
from .pages import LoginPage, RecordsPage
from .theme import _toggle_theme

log = logging.getLogger(__name__)


class ConsoleWindow(QMainWindow):
    """Top-level window: login page until a token exists, then the records page."""

    def __init__(
        self,
        settings: Optional[ConsoleSettings] = None,
        session: Optional[SessionStore] = None,
        api: Optional[AdminApiClient] = None,
        *,
        run_async: Optional[Worker] = None,
        dispatch: Optional[Dispatch] = None,
    ) -> None:
        super().__init__()
        self.settings = settings or load_settings()
        self.session = session or SessionStore.load()
        self.api = api or AdminApiClient(
            self.settings.base_url, self.session.get, timeout=self.settings.timeout
        )

        self._executor: Optional[ThreadPoolExecutor] = None
        self._background_futures: set[Future[Any]] = set()
        self._cleanup_callbacks: list[Callable[[], None]] = []
        if run_async is None:
            self._executor = ThreadPoolExecutor(max_workers=2)
            run_async = self._submit_background
        if dispatch is None:
            dispatch = UiDispatcher(self)
        self._context = ConsoleContext(
            run_async=run_async,
            dispatch=dispatch,
            show_toast=self._show_toast,
            register_cleanup=self._register_cleanup,
        )

        self.console = ModelConsole(
            self.api,
            self.session,
            run_async=self._context.run_async,
            dispatch=self._context.dispatch,
            page_size=self.settings.page_size,
        )
        self.console.add_listener(self._on_console_event)
        self._register_cleanup(self.console.shutdown)

        self.setWindowTitle("Data Admin")
        self.resize(1100, 760)

        central = QWidget()
        root = QVBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        header = QFrame()
        header.setObjectName("Header")
        h = QHBoxLayout(header)
        h.setContentsMargins(18, 10, 18, 10)
        title = QLabel("Data Admin")
        title.setObjectName("Title")
        h.addWidget(title)
        h.addStretch()
        self.server_label = QLabel(self.settings.base_url)
        self.server_label.setObjectName("Hint")
        h.addWidget(self.server_label)
        root.addWidget(header)

        self.stack = QStackedWidget()
        self.login_page = LoginPage(on_login=self._handle_login)
        self.records_page = RecordsPage(self.console)
        for page in (self.login_page, self.records_page):
            page.attach(self._context)
            self.stack.addWidget(page)
        root.addWidget(self.stack)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())
        self._build_menu()

        self._show_current_page()
        if self.session.is_authenticated:
            self.console.load_models()

    @property
    def context(self) -> ConsoleContext:
        return self._context

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        sign_out_action = QAction("Sign out", self)
        sign_out_action.triggered.connect(self.console.sign_out)
        file_menu.addAction(sign_out_action)
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        view_menu = self.menuBar().addMenu("&View")
        theme_action = QAction("Toggle Dark Mode", self)
        theme_action.triggered.connect(lambda: _toggle_theme(self.statusBar()))
        view_menu.addAction(theme_action)

    def _handle_login(self, token: str) -> None:
        self.console.sign_in(token)

    def _on_console_event(self, event: str, payload: Any) -> None:
        if event == mc.EVENT_SESSION:
            self._show_current_page()
        elif event == mc.EVENT_CONNECTION and not payload:
            self._show_toast("error", self.console.last_error or "Not connected")

    def _show_current_page(self) -> None:
        if self.session.is_authenticated:
            self.stack.setCurrentWidget(self.records_page)
            message = "Signed in"
        else:
            self.stack.setCurrentWidget(self.login_page)
            self.login_page.on_attached()
            message = "Signed out"
        try:
            self.statusBar().showMessage(message, 3000)
        except Exception:
            pass

    def _submit_background(self, worker: Callable[[], Any]) -> Future[Any]:
        future = self._executor.submit(worker)
        self._background_futures.add(future)

        def _cleanup(fut: Future[Any]) -> None:
            self._background_futures.discard(fut)

        future.add_done_callback(_cleanup)
        return future

    def _register_cleanup(self, callback: Callable[[], None]) -> None:
        if callback not in self._cleanup_callbacks:
            self._cleanup_callbacks.append(callback)

    def _show_toast(self, kind: str, message: str) -> None:
        prefixes = {
            "success": "SUCCESS",
            "error": "ERROR",
            "warning": "WARN",
            "info": "INFO",
        }
        prefix = prefixes.get(kind, kind.upper())
        try:
            self.statusBar().showMessage(f"[{prefix}] {message}", 5000)
        except Exception:
            pass

    def closeEvent(self, event) -> None:  # type: ignore[override]
        for callback in list(self._cleanup_callbacks):
            try:
                callback()
            except Exception:
                log.exception("Cleanup callback failed")
        for fut in list(self._background_futures):
            fut.cancel()
        if self._executor is not None:
            self._executor.shutdown(wait=False)
        self.records_page.detach()
        super().closeEvent(event)


__all__ = ["ConsoleWindow"]
