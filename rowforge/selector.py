"""Selection of nested values from objects, mappings and sequences by dotted path."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def _step(obj: Any, key: str) -> Any:
    """Take one path segment from ``obj``; a missing segment gives None."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray)):
        try:
            index = int(key)
        except ValueError:
            return None
        try:
            return obj[index]
        except IndexError:
            return None
    return getattr(obj, key, None)


def select(obj: Any, path: str) -> Any:
    """Follow a dotted ``path`` such as ``"Foo.Bar"`` or ``".bar"`` into ``obj``.

    Segments name attributes, mapping keys or sequence indexes. Empty segments
    are skipped, so an empty path gives ``obj`` itself. Anything missing along
    the way gives None.
    """
    for part in path.split("."):
        if not part:
            continue
        obj = _step(obj, part)
        if obj is None:
            return None
    return obj


def _is_separator(char: str) -> bool:
    return not (char.isalnum() or char == "_")


def underscore_to_upper_camel_case(text: str) -> str:
    """Turn ``snake_case`` into ``UpperCamelCase``."""
    spaced = text.replace("_", " ")
    chars = []
    previous = " "
    for char in spaced:
        chars.append(char.upper() if _is_separator(previous) else char)
        previous = char
    return "".join(chars).replace(" ", "")