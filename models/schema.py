"""Schema and record shapes returned by the admin API."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

Record = Dict[str, Any]


class FieldKind(Enum):
    """Closed set of scalar field kinds understood by the console."""

    STRING = "String"
    INT = "Int"
    BIGINT = "BigInt"
    FLOAT = "Float"
    DECIMAL = "Decimal"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    JSON = "Json"
    OTHER = "Other"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "FieldKind":
        """Return the kind for ``name``; unknown names map to ``OTHER``."""

        for kind in cls:
            if kind is not cls.OTHER and kind.value == name:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    type: str = "String"

    @property
    def kind(self) -> FieldKind:
        return FieldKind.from_name(self.type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDescriptor":
        return cls(name=str(data["name"]), type=str(data.get("type") or "String"))


@dataclass(frozen=True)
class ModelDescriptor:
    name: str
    scalar_fields: Tuple[FieldDescriptor, ...] = ()

    def field(self, name: str) -> Optional[FieldDescriptor]:
        for descriptor in self.scalar_fields:
            if descriptor.name == name:
                return descriptor
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelDescriptor":
        fields = tuple(
            FieldDescriptor.from_dict(item) for item in data.get("scalarFields") or []
        )
        return cls(name=str(data["name"]), scalar_fields=fields)


def parse_models(payload: Optional[Dict[str, Any]]) -> List[ModelDescriptor]:
    """Build descriptors from an introspection response body."""

    if not payload:
        return []
    return [ModelDescriptor.from_dict(item) for item in payload.get("models") or []]


@dataclass
class RecordPage:
    """One offset-addressed slice of a model's records."""

    items: List[Record] = field(default_factory=list)
    total: int = 0
    id_field_name: str = "id"
    scalar_fields: Tuple[str, ...] = ()
    skip: int = 0
    take: int = 0

    @property
    def editable_fields(self) -> List[str]:
        """Scalar fields shown in the form, i.e. everything but the id."""

        return [name for name in self.scalar_fields if name != self.id_field_name]

    @property
    def columns(self) -> List[str]:
        """Table columns: the id first, then the remaining scalar fields."""

        return [self.id_field_name, *self.editable_fields]

    @classmethod
    def from_dict(
        cls, payload: Optional[Dict[str, Any]], *, skip: int = 0, take: int = 0
    ) -> "RecordPage":
        payload = payload or {}
        items = list(payload.get("items") or [])
        total = payload.get("total")
        try:
            total = int(total) if total is not None else len(items)
        except (TypeError, ValueError):
            total = len(items)
        return cls(
            items=items,
            total=max(0, total),
            id_field_name=str(payload.get("idFieldName") or "id"),
            scalar_fields=_names(payload.get("scalarFields") or ()),
            skip=skip,
            take=take,
        )


def _names(values: Iterable[Any]) -> Tuple[str, ...]:
    # Some backends send full descriptors here instead of bare names.
    names = []
    for value in values:
        if isinstance(value, dict):
            value = value.get("name")
        if value is not None:
            names.append(str(value))
    return tuple(names)


__all__ = [
    "FieldDescriptor",
    "FieldKind",
    "ModelDescriptor",
    "Record",
    "RecordPage",
    "parse_models",
]
