"""Shared context handed to console pages."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

Worker = Callable[[Callable[[], Any]], Any]
Dispatch = Callable[[Callable[[], None]], None]
ToastFn = Callable[[str, str], None]
CleanupFn = Callable[[Callable[[], None]], None]
ConfirmFn = Callable[[str], bool]


@dataclass(frozen=True)
class ConsoleContext:
    """Lightweight dependency bundle for console pages."""

    run_async: Worker
    dispatch: Dispatch
    show_toast: Optional[ToastFn] = None
    register_cleanup: Optional[CleanupFn] = None
    confirm: Optional[ConfirmFn] = None


__all__ = ["ConsoleContext", "ConfirmFn", "Dispatch", "ToastFn", "CleanupFn", "Worker"]
