"""Tagged-union representation of arbitrary nested configuration values.

Dynamic attributes (for example connected app ``data``) hold any mix of
strings, numbers, booleans, lists and maps. ``from_wire`` turns decoded JSON
into a ``Value`` tree and ``to_wire`` turns it back. JSON ``null`` is carried
as ``StringValue(None)``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class StringValue:
    value: str | None


@dataclass(frozen=True, slots=True)
class BoolValue:
    value: bool


@dataclass(frozen=True, slots=True)
class NumberValue:
    value: int | float


@dataclass(frozen=True, slots=True)
class ListValue:
    items: tuple[Value, ...] = ()


@dataclass(frozen=True, slots=True)
class MapValue:
    entries: Mapping[str, Value] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Value:
        return self.entries[key]


Value: TypeAlias = StringValue | BoolValue | NumberValue | ListValue | MapValue


def from_wire(obj: Any) -> Value:
    if obj is None:
        return StringValue(None)
    if isinstance(obj, str):
        return StringValue(obj)
    # bool is a subclass of int, so it has to be matched first.
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, (int, float)):
        return NumberValue(obj)
    if isinstance(obj, Mapping):
        return MapValue({str(key): from_wire(item) for key, item in obj.items()})
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(from_wire(item) for item in obj))
    raise TypeError(f"unsupported value type {type(obj).__name__}")


def to_wire(value: Value) -> Any:
    if isinstance(value, (StringValue, BoolValue, NumberValue)):
        return value.value
    if isinstance(value, ListValue):
        return [to_wire(item) for item in value.items]
    if isinstance(value, MapValue):
        return {key: to_wire(item) for key, item in value.entries.items()}
    raise TypeError(f"unsupported value type {type(value).__name__}")


def map_from_wire(obj: Mapping[str, Any] | None) -> MapValue:
    if obj is None:
        return MapValue()
    return MapValue({str(key): from_wire(item) for key, item in obj.items()})
