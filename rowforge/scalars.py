"""Conversion of loose values to the scalar and list types a column stores."""

from __future__ import annotations

import base64
import dataclasses
import json
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any


class ConversionError(ValueError):
    """Raised when a value cannot be converted to the requested type."""


_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_BOOL_WORDS = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}

_JSON_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

_NEGATIVE_NOT_ALLOWED = "unable to cast negative value"


def _describe(value: Any, target: str) -> str:
    return f"unable to cast {value!r} of type {type(value).__name__} to {target}"


def _wrap(number: int, bits: int) -> int:
    """Reduce ``number`` to a signed integer of ``bits`` bits, wrapping around."""
    mask = (1 << bits) - 1
    number &= mask
    if number >= 1 << (bits - 1):
        number -= 1 << bits
    return number


def _parse_int(text: str) -> int:
    """Parse an integer literal with an optional base prefix into a 64-bit value."""
    if not text or text != text.strip() or not text.isascii():
        raise ValueError(text)
    sign = 1
    body = text
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if not body or body[0] in "+-":
        raise ValueError(text)
    lowered = body.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        number = int(body, 0)
    elif len(body) > 1 and body[0] == "0":
        number = int(body, 8)
    else:
        number = int(body, 10)
    number *= sign
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(text)
    return number


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or not text.isascii():
        raise ValueError(text)
    lowered = text.lower()
    if "0x" in lowered:
        return float.fromhex(text)
    if "_" in text:
        raise ValueError(text)
    number = float(text)
    if math.isinf(number) and "inf" not in lowered:
        raise ValueError(text)
    return number


def trim_zero_decimal(text: str) -> str:
    """Drop a decimal part made only of zeros, so ``"10.00"`` becomes ``"10"``."""
    head, dot, tail = text.rpartition(".")
    if dot and tail and set(tail) == {"0"}:
        return head
    return text


def _to_integer(value: Any, bits: int, target: str) -> int | None:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _wrap(int(value), bits)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ConversionError(_describe(value, target))
        return _wrap(int(value), bits)
    if isinstance(value, Decimal):
        return _to_integer(str(value), bits, target)
    if isinstance(value, str):
        if not value:
            return None
        try:
            number = _parse_int(trim_zero_decimal(value))
        except ValueError:
            raise ConversionError(_describe(value, target)) from None
        return _wrap(number, bits)
    raise ConversionError(_describe(value, target))


def to_small_int(value: Any) -> int | None:
    """Convert to a 16-bit signed integer; an empty string gives None."""
    return _to_integer(value, 16, "int16")


def to_int(value: Any) -> int | None:
    """Convert to a 64-bit signed integer; an empty string gives None."""
    return _to_integer(value, 64, "int")


def to_big_int(value: Any) -> int | None:
    """Convert to a 64-bit signed integer; an empty string gives None."""
    return _to_integer(value, 64, "int64")


def to_int_list(value: Any) -> list[int] | None:
    """Convert a sequence to a list of integers; empty elements become 0."""
    if isinstance(value, str):
        if not value:
            return None
        raise ConversionError(_describe(value, "[]int"))
    if isinstance(value, (list, tuple, bytes, bytearray)):
        return [to_int(item) or 0 for item in value]
    raise ConversionError(_describe(value, "[]int"))


def to_float(value: Any) -> float | None:
    """Convert to a float; None and an empty string give None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, (int, Decimal)):
        try:
            return float(value)
        except OverflowError:
            raise ConversionError(_describe(value, "float64")) from None
    if isinstance(value, str):
        if not value:
            return None
        try:
            return _parse_float(value)
        except ValueError:
            raise ConversionError(_describe(value, "float64")) from None
    raise ConversionError(_describe(value, "float64"))


def to_bool(value: Any) -> bool | None:
    """Convert to a bool; None and an empty string give None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        if not value:
            return None
        try:
            return _BOOL_WORDS[value]
        except KeyError:
            raise ConversionError(_describe(value, "bool")) from None
    if isinstance(value, Decimal):
        try:
            number = to_big_int(value)
        except ConversionError:
            raise ConversionError(_describe(value, "bool")) from None
        return number != 0
    raise ConversionError(_describe(value, "bool"))


def _format_float(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if isinstance(obj, Decimal):
        if obj.is_finite() and obj == obj.to_integral_value():
            return int(obj)
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if hasattr(obj, "__dict__"):
        return {key: item for key, item in vars(obj).items() if not key.startswith("_")}
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _dump_json(value: Any) -> str:
    """Serialise ``value`` as compact JSON with HTML-sensitive characters escaped."""
    text = json.dumps(
        value,
        default=_json_default,
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
    )
    return text.translate(_JSON_ESCAPES)


def to_string(value: Any) -> str | None:
    """Convert to text; objects without a text form are rendered as JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, BaseException):
        return str(value)
    if type(value).__str__ is not object.__str__:
        return str(value)
    try:
        text = _dump_json(value)
    except (TypeError, ValueError, RecursionError):
        raise ConversionError(_describe(value, "string")) from None
    return text or None


def to_string_list(value: Any) -> list[str] | None:
    """Convert to a list of text; a string is split on whitespace."""
    if isinstance(value, str):
        if not value:
            return None
        return value.split()
    if isinstance(value, (bytes, bytearray)):
        return [str(item) for item in value]
    if isinstance(value, (list, tuple)):
        return [text for text in map(to_string, value) if text is not None]
    raise ConversionError(_describe(value, "[]string"))


def to_byte(value: Any) -> int | None:
    """Convert to an unsigned 8-bit integer; negative values are rejected."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if value < 0:
            raise ConversionError(_NEGATIVE_NOT_ALLOWED)
        return int(value) & 0xFF
    if isinstance(value, float):
        if value < 0:
            raise ConversionError(_NEGATIVE_NOT_ALLOWED)
        if not math.isfinite(value):
            raise ConversionError(_describe(value, "uint8"))
        return int(value) & 0xFF
    if isinstance(value, Decimal):
        return to_byte(str(value))
    if isinstance(value, str):
        if not value:
            return None
        try:
            number = _parse_int(trim_zero_decimal(value))
        except ValueError:
            raise ConversionError(_describe(value, "uint8")) from None
        if number < 0:
            raise ConversionError(_NEGATIVE_NOT_ALLOWED)
        return number & 0xFF
    raise ConversionError(_describe(value, "uint8"))


def to_bytes(value: Any) -> bytes | None:
    """Convert to bytes; a sequence is converted element by element."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        if not value:
            return None
        raise ConversionError(_describe(value, "[]byte"))
    if isinstance(value, (list, tuple)):
        return bytes(to_byte(item) or 0 for item in value)
    raise ConversionError(_describe(value, "[]byte"))