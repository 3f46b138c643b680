"""
Attribute and literal values.

A value is a string, a boolean, a tuple of strings or ``None``. String lists
are held as tuples so that values stay hashable inside expressions.
"""

from __future__ import annotations

from typing import Any

Value = str | bool | tuple[str, ...] | None


def read_value(raw: Any) -> Value:
    """Convert a decoded JSON value to a Value.

    Raises:
        ValueError: If the JSON value is not a string, boolean, null or array of strings
    """
    if raw is None or isinstance(raw, (bool, str)):
        return raw
    if isinstance(raw, (list, tuple)):
        if not all(isinstance(item, str) for item in raw):
            raise ValueError(f"Unsupported array value: {raw!r}")
        return tuple(raw)
    raise ValueError(f"Unsupported value type: {type(raw).__name__}")


def write_value(value: Value) -> Any:
    """Convert a Value to its JSON form."""
    if isinstance(value, tuple):
        return list(value)
    return value


def value_type_name(value: Value) -> str:
    """Name of the value variant, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "list"
