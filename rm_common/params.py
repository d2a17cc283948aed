"""Helpers for reading numeric values out of parameter mappings."""

from collections.abc import Mapping, Sequence
from typing import Any

__all__ = ["get_param", "as_float", "float_field", "float_member"]


def get_param(params: Mapping[str, Any], name: str, default: Any) -> Any:
    """Return ``params[name]`` or ``default`` when the parameter is absent."""
    return params.get(name, default)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_float(value: Any) -> float:
    """Convert an integer or floating point parameter to ``float``."""
    if not _is_number(value):
        raise TypeError(f"expected an int or float parameter, got {type(value).__name__}")
    return float(value)


def float_field(value: Sequence[Any], field: int) -> float:
    """Return element ``field`` of a parameter array as ``float``."""
    item = value[field]
    if not _is_number(item):
        raise TypeError(f"element {field} is not numeric: {item!r}")
    return float(item)


def float_member(value: Mapping[str, Any], field: str, default: float) -> float:
    """Return member ``field`` of a parameter struct as ``float``, or ``default`` if missing."""
    if field not in value:
        return default
    item = value[field]
    if not _is_number(item):
        raise TypeError(f"member {field!r} is not numeric: {item!r}")
    return float(item)