"""Base class for console pages."""
from __future__ import annotations

from typing import Optional

from PyQt6.QtWidgets import QWidget

from ..context import ConsoleContext


class ConsolePage(QWidget):
    """QWidget with a lifecycle hook for the shared context."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._context: Optional[ConsoleContext] = None

    def attach(self, context: ConsoleContext) -> None:
        self._context = context
        self.on_attached()

    def on_attached(self) -> None:
        """Hook invoked once the shared context is available."""

    def refresh(self) -> None:  # pragma: no cover - UI hook
        """Optional hook for the window to trigger reloads."""


__all__ = ["ConsolePage"]
