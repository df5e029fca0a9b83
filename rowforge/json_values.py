"""Conversion of loose values to JSON text."""

from __future__ import annotations

from typing import Any

from rowforge.scalars import ConversionError, _dump_json


def to_json_string(value: Any) -> str:
    """Render ``value`` as JSON text.

    A string that does not start with ``{`` or ``[`` is wrapped in a one-element
    array; bytes are taken as JSON text already; anything else is serialised.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text.startswith(("{", "[")):
            return f'["{text}"]'
        return text
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    try:
        return _dump_json(value)
    except (TypeError, ValueError, RecursionError):
        raise ConversionError(
            f"unable to cast {value!r} of type {type(value).__name__} to JSON"
        ) from None


def to_json(value: Any) -> str | None:
    """Convert to JSON text; None and empty output give None."""
    if value is None:
        return None
    return to_json_string(value) or None