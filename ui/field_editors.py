"""Qt editors for the record form, one class per :class:`WidgetKind`."""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Type

from PyQt6.QtCore import QDateTime, QRegularExpression
from PyQt6.QtGui import QRegularExpressionValidator
from PyQt6.QtWidgets import QCheckBox, QDateTimeEdit, QLineEdit, QPlainTextEdit

from logic.field_widgets import WidgetKind, display_value, widget_for

ChangeFn = Callable[[str, Any], None]

QT_DATETIME_FORMAT = "yyyy-MM-dd'T'HH:mm"
NUMBER_PATTERN = r"^-?\d*(\.\d*)?([eE][-+]?\d*)?$"


class FieldEditor:
    """Wraps one Qt widget and reports user edits through ``on_change``.

    Values written with :meth:`set_value` are not echoed back, so a draft
    seeded from a record keeps its original values until the user edits
    them.
    """

    widget_kind: WidgetKind = WidgetKind.TEXT

    def __init__(self, name: str, on_change: Optional[ChangeFn] = None) -> None:
        self.name = name
        self._on_change = on_change
        self._loading = False
        self.widget = self._build()

    def _build(self) -> Any:
        raise NotImplementedError

    def _show(self, value: Any) -> None:
        raise NotImplementedError

    def value(self) -> Any:
        raise NotImplementedError

    def set_value(self, value: Any) -> None:
        self._loading = True
        try:
            self._show(display_value(self.widget_kind, value))
        finally:
            self._loading = False

    def _changed(self, *_args: Any) -> None:
        if self._loading or self._on_change is None:
            return
        self._on_change(self.name, self.value())


class ToggleEditor(FieldEditor):
    widget_kind = WidgetKind.TOGGLE

    def _build(self) -> QCheckBox:
        widget = QCheckBox()
        widget.toggled.connect(self._changed)
        return widget

    def _show(self, value: Any) -> None:
        self.widget.setChecked(bool(value))

    def value(self) -> bool:
        return bool(self.widget.isChecked())


class MultilineEditor(FieldEditor):
    """Raw JSON text; the server parses and validates it."""

    widget_kind = WidgetKind.MULTILINE

    def _build(self) -> QPlainTextEdit:
        widget = QPlainTextEdit()
        widget.setMinimumHeight(90)
        widget.textChanged.connect(self._changed)
        return widget

    def _show(self, value: Any) -> None:
        self.widget.setPlainText(value)

    def value(self) -> str:
        return self.widget.toPlainText()


class TextEditor(FieldEditor):
    widget_kind = WidgetKind.TEXT

    def _build(self) -> QLineEdit:
        widget = QLineEdit()
        widget.textEdited.connect(self._changed)
        return widget

    def _show(self, value: Any) -> None:
        self.widget.setText(value)

    def value(self) -> str:
        return self.widget.text()


class NumericEditor(TextEditor):
    """Number typed as text; the server coerces it to the column type."""

    widget_kind = WidgetKind.NUMERIC

    def _build(self) -> QLineEdit:
        widget = super()._build()
        widget.setPlaceholderText("0")
        validator = QRegularExpressionValidator(QRegularExpression(NUMBER_PATTERN))
        widget.setValidator(validator)
        self._validator = validator
        return widget


class DateTimeEditor(FieldEditor):
    """Minute-precision picker in UTC; the minimum date stands in for "no value".

    Values are shown in UTC, so edited values are sent with a ``Z`` suffix.
    """

    widget_kind = WidgetKind.DATETIME

    def _build(self) -> QDateTimeEdit:
        widget = QDateTimeEdit()
        widget.setCalendarPopup(True)
        widget.setDisplayFormat(QT_DATETIME_FORMAT)
        widget.setSpecialValueText(" ")
        self._empty = widget.minimumDateTime()
        widget.setDateTime(self._empty)
        widget.dateTimeChanged.connect(self._changed)
        return widget

    def _show(self, value: Any) -> None:
        if value:
            parsed = QDateTime.fromString(value, QT_DATETIME_FORMAT)
            if parsed.isValid():
                self.widget.setDateTime(parsed)
                return
        self.widget.setDateTime(self._empty)

    def value(self) -> str:
        current = self.widget.dateTime()
        if current == self._empty:
            return ""
        return current.toString(QT_DATETIME_FORMAT) + "Z"


EDITORS: Dict[WidgetKind, Type[FieldEditor]] = {
    WidgetKind.TOGGLE: ToggleEditor,
    WidgetKind.MULTILINE: MultilineEditor,
    WidgetKind.NUMERIC: NumericEditor,
    WidgetKind.DATETIME: DateTimeEditor,
    WidgetKind.TEXT: TextEditor,
}


def create_editor(kind: Any, name: str, on_change: Optional[ChangeFn] = None) -> FieldEditor:
    """Build the editor for a field of ``kind`` (a FieldKind or type name)."""

    return EDITORS[widget_for(kind)](name, on_change)


__all__ = [
    "DateTimeEditor",
    "EDITORS",
    "FieldEditor",
    "MultilineEditor",
    "NumericEditor",
    "TextEditor",
    "ToggleEditor",
    "create_editor",
]
