"""
otel2zipkin.core.attributes - Canonical string form of OpenTelemetry attribute values.

Zipkin tags are flat string-to-string pairs, so every typed attribute value
has to be rendered into exactly one canonical string. The set of value kinds
is closed: four scalar kinds and a homogeneous sequence of each.

Functions:
    attribute_type: Classify a value into its AttributeType
    stringify_attribute: Render a value as its canonical tag string
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Sequence, Union

AttributeScalar = Union[str, bool, int, float]
AttributeValue = Union[AttributeScalar, Sequence[AttributeScalar]]
Attributes = Mapping[str, AttributeValue]


class AttributeType(Enum):
    """Closed set of attribute value kinds."""

    STRING = "string"
    BOOLEAN = "boolean"
    LONG = "long"
    DOUBLE = "double"
    STRING_ARRAY = "string_array"
    BOOLEAN_ARRAY = "boolean_array"
    LONG_ARRAY = "long_array"
    DOUBLE_ARRAY = "double_array"

    @property
    def is_array(self) -> bool:
        return self.name.endswith("_ARRAY")


_ARRAY_OF: Dict[AttributeType, AttributeType] = {
    AttributeType.STRING: AttributeType.STRING_ARRAY,
    AttributeType.BOOLEAN: AttributeType.BOOLEAN_ARRAY,
    AttributeType.LONG: AttributeType.LONG_ARRAY,
    AttributeType.DOUBLE: AttributeType.DOUBLE_ARRAY,
}


def _scalar_type(value: Any) -> AttributeType:
    # bool is a subclass of int and must be checked first
    if isinstance(value, bool):
        return AttributeType.BOOLEAN
    if isinstance(value, int):
        return AttributeType.LONG
    if isinstance(value, float):
        return AttributeType.DOUBLE
    if isinstance(value, str):
        return AttributeType.STRING
    raise TypeError(f"Unsupported attribute value type: {type(value).__name__}")


def attribute_type(value: Any) -> AttributeType:
    """Classify an attribute value.

    Args:
        value: A scalar or a list/tuple of scalars of one kind

    Returns:
        The AttributeType of the value. Empty sequences classify as
        STRING_ARRAY since they carry no element kind.

    Raises:
        TypeError: If the value is not a supported kind or a sequence mixes kinds
    """
    if isinstance(value, (list, tuple)):
        if not value:
            return AttributeType.STRING_ARRAY
        element_types = {_scalar_type(element) for element in value}
        if len(element_types) != 1:
            raise TypeError("Attribute arrays must be homogeneous")
        return _ARRAY_OF[element_types.pop()]
    return _scalar_type(value)


def _format_boolean(value: bool) -> str:
    return "true" if value else "false"


def _format_long(value: int) -> str:
    return str(value)


def _format_double(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def _format_string(value: str) -> str:
    return value


_SCALAR_FORMATTERS: Dict[AttributeType, Callable[[Any], str]] = {
    AttributeType.STRING: _format_string,
    AttributeType.BOOLEAN: _format_boolean,
    AttributeType.LONG: _format_long,
    AttributeType.DOUBLE: _format_double,
}

_ELEMENT_FORMATTERS: Dict[AttributeType, Callable[[Any], str]] = {
    array_type: _SCALAR_FORMATTERS[scalar_type]
    for scalar_type, array_type in _ARRAY_OF.items()
}


def stringify_attribute(value: AttributeValue) -> str:
    """Render an attribute value as its canonical Zipkin tag string.

    Booleans become ``true``/``false``, integers plain decimal, floats the
    shortest round-trippable decimal and strings pass through unchanged.
    Sequences are rendered element by element and joined with a bare comma.

    Args:
        value: The attribute value to render

    Returns:
        Canonical string form of the value

    Raises:
        TypeError: If the value is outside the supported attribute kinds

    Example:
        >>> stringify_attribute([32.33, -98.3])
        '32.33,-98.3'
    """
    value_type = attribute_type(value)
    if value_type.is_array:
        formatter = _ELEMENT_FORMATTERS[value_type]
        return ",".join(formatter(element) for element in value)
    return _SCALAR_FORMATTERS[value_type](value)
