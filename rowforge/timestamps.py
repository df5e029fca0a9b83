"""Conversion of loose values to timestamps."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from enum import IntEnum
from typing import Any, Iterable

from rowforge.scalars import ConversionError, to_big_int


class TimeFormatType(IntEnum):
    """How a format treats time zones; the first two are read as local time."""

    NO_TIMEZONE = 0
    NAMED_TIMEZONE = 1
    NUMERIC_TIMEZONE = 2
    NUMERIC_AND_NAMED_TIMEZONE = 3
    TIME_ONLY = 4


@dataclass(frozen=True)
class TimeFormat:
    """A ``strptime`` pattern together with its time zone handling."""

    formatter: str
    format_type: TimeFormatType = TimeFormatType.TIME_ONLY


DEFAULT_TIME_FORMATS: tuple[TimeFormat, ...] = (
    TimeFormat("%Y-%m-%dT%H:%M:%S%z", TimeFormatType.NUMERIC_TIMEZONE),
    TimeFormat("%Y-%m-%dT%H:%M:%S", TimeFormatType.NO_TIMEZONE),
    TimeFormat("%a, %d %b %Y %H:%M:%S %z", TimeFormatType.NUMERIC_TIMEZONE),
    TimeFormat("%a, %d %b %Y %H:%M:%S %Z", TimeFormatType.NAMED_TIMEZONE),
    TimeFormat("%d %b %y %H:%M %z", TimeFormatType.NUMERIC_TIMEZONE),
    TimeFormat("%d %b %y %H:%M %Z", TimeFormatType.NAMED_TIMEZONE),
    TimeFormat("%A, %d-%b-%y %H:%M:%S %Z", TimeFormatType.NAMED_TIMEZONE),
    TimeFormat("%Y-%m-%d %H:%M:%S %z %Z", TimeFormatType.NUMERIC_AND_NAMED_TIMEZONE),
    TimeFormat("%Y-%m-%d %H:%M:%S%z", TimeFormatType.NUMERIC_TIMEZONE),
    TimeFormat("%Y-%m-%d %H:%M:%S", TimeFormatType.NO_TIMEZONE),
    TimeFormat("%Y-%m-%dT%H:%MZ", TimeFormatType.NO_TIMEZONE),
    TimeFormat("%a %b %d %H:%M:%S %Y", TimeFormatType.NO_TIMEZONE),
    TimeFormat("%a %b %d %H:%M:%S %Z %Y", TimeFormatType.NAMED_TIMEZONE),
    TimeFormat("%a %b %d %H:%M:%S %z %Y", TimeFormatType.NUMERIC_TIMEZONE),
    TimeFormat("%Y-%m-%d", TimeFormatType.NO_TIMEZONE),
    TimeFormat("%d %b %Y", TimeFormatType.NO_TIMEZONE),
    TimeFormat("%Y-%m-%d %H:%M:%S %z", TimeFormatType.NUMERIC_TIMEZONE),
    TimeFormat("%I:%M%p", TimeFormatType.TIME_ONLY),
    TimeFormat("%b %d %H:%M:%S", TimeFormatType.TIME_ONLY),
)

_RENDER_FORMAT = "%Y-%m-%d %H:%M:%S"
_ZONE_NAME = re.compile(r"\b[A-Z]{3,5}\b")
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def _strptime(text: str, pattern: str) -> datetime:
    """Parse with ``pattern``, accepting any zone abbreviation and fractional seconds."""
    if "%Z" in pattern:
        names = list(_ZONE_NAME.finditer(text))
        if not names:
            raise ValueError(text)
        last = names[-1]
        text = f"{text[:last.start()]}UTC{text[last.end():]}"
    attempts = [(text, pattern)]
    if "%S" in pattern and "%S.%f" not in pattern:
        attempts.append((_LONG_FRACTION.sub(r"\1", text), pattern.replace("%S", "%S.%f", 1)))
    for candidate_text, candidate_pattern in attempts:
        try:
            return datetime.strptime(candidate_text, candidate_pattern)
        except ValueError:
            continue
    raise ValueError(text)


def _as_local(naive: datetime) -> datetime:
    try:
        return naive.astimezone()
    except (OverflowError, OSError, ValueError):
        return naive.replace(tzinfo=datetime.now().astimezone().tzinfo)


def parse_date_with(
    text: str, location: tzinfo | None, formats: Iterable[TimeFormat]
) -> datetime | None:
    """Parse ``text`` with the first format that fits.

    Formats without a numeric offset are read as wall-clock time in ``location``,
    or in local time when ``location`` is None.
    """
    if not text:
        return None
    for time_format in formats:
        try:
            parsed = _strptime(text, time_format.formatter)
        except ValueError:
            continue
        if time_format.format_type <= TimeFormatType.NAMED_TIMEZONE:
            naive = parsed.replace(tzinfo=None)
            if location is None:
                return _as_local(naive)
            return naive.replace(tzinfo=location)
        offset = parsed.utcoffset()
        if offset is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.replace(tzinfo=timezone(offset))
    raise ConversionError(f"unable to parse date: {text}")


def _from_unix(seconds: int) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, timezone.utc).astimezone()
    except (OverflowError, OSError, ValueError):
        raise ConversionError(f"unable to cast {seconds!r} to Time") from None


def to_timestamp(value: Any, *formats: TimeFormat) -> datetime | None:
    """Convert to a datetime.

    Strings are parsed with ``formats`` first and then with the built-in formats;
    integers are Unix seconds; other objects are read through their ``strftime``.
    Values with no usable time give None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.replace(tzinfo=None) == datetime.min:
            return None
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return None if value == 0 else _from_unix(int(value))
    if isinstance(value, Decimal):
        try:
            seconds = to_big_int(value)
        except ConversionError:
            raise ConversionError(
                f"unable to cast {value!r} of type Decimal to Time"
            ) from None
        return _from_unix(seconds) if seconds else None
    if isinstance(value, str):
        if not value:
            return None
        return parse_date_with(value, None, (*formats, *DEFAULT_TIME_FORMATS))
    render = getattr(value, "strftime", None)
    if not callable(render):
        return None
    rendered = render(_RENDER_FORMAT)
    if not rendered:
        return None
    try:
        parsed = datetime.strptime(rendered, _RENDER_FORMAT)
    except ValueError as error:
        raise ConversionError(str(error)) from None
    return parsed.replace(tzinfo=timezone.utc)