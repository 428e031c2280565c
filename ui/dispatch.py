"""Marshal callbacks from worker threads onto the Qt GUI thread."""

from __future__ import annotations

from typing import Any, Callable

from PyQt6.QtCore import QObject, pyqtSignal


class UiDispatcher(QObject):
    """Queue callables for execution on the thread that owns this object.

    Qt delivers a signal emitted from a worker thread to a receiver living
    on the GUI thread through the event loop, so ``callback`` always runs
    on the GUI thread.
    """

    _invoke = pyqtSignal(object)

    def __init__(self, parent: Any = None) -> None:
        super().__init__(parent)
        self._invoke.connect(self._run)

    def __call__(self, callback: Callable[[], None]) -> None:
        self._invoke.emit(callback)

    def _run(self, callback: Callable[[], None]) -> None:
        callback()


__all__ = ["UiDispatcher"]
