"""Reusable UI components for consistent styling."""

from typing import Any

from PyQt6.QtWidgets import (
    QFrame,
    QVBoxLayout,
    QLabel,
    QSizePolicy,
)


def _call_if_exists(obj: Any, method: str, *args: Any, **kwargs: Any) -> None:
    """Invoke ``method`` on ``obj`` when available."""

    func = getattr(obj, method, None)
    if callable(func):
        try:
            func(*args, **kwargs)
        except Exception:
            pass


class Card(QFrame):
    """Framed container with standard padding and layout."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        _call_if_exists(self, "setObjectName", "Card")
        policy_enum = getattr(QSizePolicy, "Policy", None)
        h_policy = getattr(policy_enum, "Expanding", None) if policy_enum else None
        v_policy = getattr(policy_enum, "Minimum", None) if policy_enum else None
        if h_policy is not None and v_policy is not None:
            _call_if_exists(self, "setSizePolicy", h_policy, v_policy)
        shape_enum = getattr(QFrame, "Shape", None)
        frame_shape = getattr(shape_enum, "StyledPanel", None)
        if frame_shape is not None:
            _call_if_exists(self, "setFrameShape", frame_shape)
        layout = QVBoxLayout()
        self._fallback_layout = layout
        _call_if_exists(self, "setLayout", layout)
        _call_if_exists(layout, "setContentsMargins", 12, 12, 12, 12)
        _call_if_exists(layout, "setSpacing", 10)

    def layout(self):  # type: ignore[override]
        """Return the active layout, falling back to the stored layout for stubs."""

        base_layout = None
        try:
            base_method = getattr(super(), "layout", None)
            if callable(base_method):
                candidate = base_method()
                if candidate is not None and candidate is not self:
                    base_layout = candidate
        except Exception:
            base_layout = None
        return base_layout or getattr(self, "_fallback_layout", None)


def section_title(text: str) -> QLabel:
    """Create a standardized section header label."""

    label = QLabel(text)
    _call_if_exists(label, "setObjectName", "SectionTitle")
    return label


def error_banner() -> QLabel:
    """Red banner used for the console's last-error slot; hidden when empty."""

    label = QLabel("")
    _call_if_exists(label, "setObjectName", "ErrorBanner")
    _call_if_exists(label, "setWordWrap", True)
    _call_if_exists(label, "setVisible", False)
    return label


def set_banner_text(label: Any, message: str) -> None:
    _call_if_exists(label, "setText", f"Error: {message}" if message else "")
    _call_if_exists(label, "setVisible", bool(message))


def field_label(name: str, type_name: str) -> QLabel:
    """Label showing a field name followed by its declared type."""

    label = QLabel(f"{name} <span style='color:#888'>({type_name})</span>")
    _call_if_exists(label, "setObjectName", "FieldLabel")
    return label


__all__ = [
    "Card",
    "error_banner",
    "field_label",
    "section_title",
    "set_banner_text",
]
