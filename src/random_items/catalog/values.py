"""Runtime-tagged catalog values and their canonical string form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

# Engine type tags for the shapes we decode
TEXT_TYPE = "ZString"
BOOL_TYPE = "bool"
FLOAT64_TYPE = "float64"


@dataclass(frozen=True)
class TextValue:
    text: str


@dataclass(frozen=True)
class BoolValue:
    flag: bool


@dataclass(frozen=True)
class Float64Value:
    number: float


@dataclass(frozen=True)
class OtherValue:
    """Any other engine type. Only the type name is kept."""

    type_name: str


DynamicValue = Union[TextValue, BoolValue, Float64Value, OtherValue]


def decode_value(value: DynamicValue) -> str:
    """Return the canonical string form of a dynamic value.

    Floats use six fixed decimals (``3.0`` -> ``"3.000000"``). Values of any
    other type decode to their type name, whatever their payload.
    """
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, BoolValue):
        return "true" if value.flag else "false"
    if isinstance(value, Float64Value):
        return f"{value.number:f}"
    return value.type_name


def value_from_json(raw: Any, type_name: str | None = None) -> DynamicValue:
    """Convert a loaded JSON/YAML value into a DynamicValue.

    An explicit engine type tag takes precedence over the Python type.
    """
    if type_name is not None:
        if type_name == TEXT_TYPE:
            return TextValue("" if raw is None else str(raw))
        if type_name == BOOL_TYPE:
            return BoolValue(_parse_bool(raw))
        if type_name == FLOAT64_TYPE:
            return Float64Value(float(raw))
        return OtherValue(type_name)

    # bool before int: bool is an int subclass
    if isinstance(raw, str):
        return TextValue(raw)
    if isinstance(raw, bool):
        return BoolValue(raw)
    if isinstance(raw, (int, float)):
        return Float64Value(float(raw))
    if isinstance(raw, list):
        return OtherValue("TArray")
    if isinstance(raw, dict):
        return OtherValue("ZDynamicObject")
    if raw is None:
        return OtherValue("void")
    return OtherValue(type(raw).__name__)


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    raise ValueError(f"invalid bool value {raw!r}")
