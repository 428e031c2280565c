"""Map scalar field kinds to editor widgets and render their values.

Every :class:`~models.schema.FieldKind` resolves to exactly one
:class:`WidgetKind`. Kinds the console does not recognise land on ``OTHER``
and are edited as plain text, so a new server-side type never breaks the
form.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from models.schema import FieldKind


class WidgetKind(Enum):
    TOGGLE = "toggle"
    MULTILINE = "multiline"
    NUMERIC = "numeric"
    DATETIME = "datetime"
    TEXT = "text"


_WIDGETS = {
    FieldKind.BOOLEAN: WidgetKind.TOGGLE,
    FieldKind.JSON: WidgetKind.MULTILINE,
    FieldKind.INT: WidgetKind.NUMERIC,
    FieldKind.BIGINT: WidgetKind.NUMERIC,
    FieldKind.FLOAT: WidgetKind.NUMERIC,
    FieldKind.DECIMAL: WidgetKind.NUMERIC,
    FieldKind.DATETIME: WidgetKind.DATETIME,
    FieldKind.STRING: WidgetKind.TEXT,
}

DATETIME_DISPLAY_FORMAT = "%Y-%m-%dT%H:%M"


def widget_for(kind: Any) -> WidgetKind:
    """Return the editor widget for ``kind``.

    ``kind`` may be a :class:`FieldKind` or the raw type string sent by the
    server. Anything unrecognised falls back to single-line text.
    """

    if not isinstance(kind, FieldKind):
        kind = FieldKind.from_name(kind if isinstance(kind, str) else None)
    return _WIDGETS.get(kind, WidgetKind.TEXT)


def display_value(widget: WidgetKind, value: Any) -> Any:
    """Render a draft value in the representation its editor expects."""

    if widget is WidgetKind.TOGGLE:
        return bool(value)
    if value is None:
        return ""
    if widget is WidgetKind.MULTILINE:
        if isinstance(value, str):
            return value
        return json.dumps(value, indent=2)
    if widget is WidgetKind.DATETIME:
        return format_datetime(value)
    return str(value)


def format_datetime(value: Any) -> str:
    """ISO-8601 UTC text truncated to minutes, or ``""`` if unparseable."""

    if value in (None, ""):
        return ""
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime(DATETIME_DISPLAY_FORMAT)


def parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        # Epoch milliseconds, as JavaScript backends serialise them.
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def cell_text(value: Any) -> str:
    """Text shown for ``value`` in a record table cell."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


__all__ = [
    "DATETIME_DISPLAY_FORMAT",
    "WidgetKind",
    "cell_text",
    "display_value",
    "format_datetime",
    "parse_datetime",
    "widget_for",
]
