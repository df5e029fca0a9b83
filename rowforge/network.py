"""Conversion of loose values to IP addresses, networks and MAC addresses."""

from __future__ import annotations

import ipaddress
from decimal import Decimal
from typing import Any, Union

from rowforge.scalars import ConversionError, to_string

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

_ADDRESS_TYPES = (ipaddress.IPv4Address, ipaddress.IPv6Address)
_NETWORK_TYPES = (ipaddress.IPv4Network, ipaddress.IPv6Network)
_MAC_LENGTHS = frozenset({6, 8, 20})
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _text_of(value: Any) -> str:
    """Render a scalar or printable object as text, as a loose string cast would."""
    if value is None:
        return ""
    if isinstance(value, (str, bool, int, float, Decimal, bytes, bytearray, BaseException)):
        return to_string(value) or ""
    if type(value).__str__ is not object.__str__:
        return str(value)
    raise ConversionError(
        f"unable to cast {value!r} of type {type(value).__name__} to string"
    )


def _lenient_text(value: Any) -> str:
    try:
        return _text_of(value)
    except ConversionError:
        return ""


def _texts_of(value: Any) -> list[str]:
    """Turn a value into a list of strings; a string is split on whitespace."""
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [_lenient_text(item) for item in value]
    try:
        return [_text_of(value)]
    except ConversionError:
        raise ConversionError(
            f"unable to cast {value!r} of type {type(value).__name__} to []string"
        ) from None


def _is_hex_group(part: str, width: int) -> bool:
    return len(part) == width and set(part) <= _HEX_DIGITS


def _parse_mac(text: str) -> bytes:
    invalid = ConversionError(f"address {text}: invalid MAC address")
    if len(text) < 14:
        raise invalid
    if text[2] in ":-":
        parts = text.split(text[2])
        width = 2
    elif text[4] == ".":
        parts = text.split(".")
        width = 4
    else:
        raise invalid
    if not all(_is_hex_group(part, width) for part in parts):
        raise invalid
    data = bytes.fromhex("".join(parts))
    if len(data) not in _MAC_LENGTHS:
        raise invalid
    return data


def _parse_cidr(text: str) -> IPNetwork:
    invalid = ConversionError(f"invalid CIDR address: {text}")
    address, slash, prefix = text.partition("/")
    if not slash or not prefix.isascii() or not prefix.isdigit() or "%" in address:
        raise invalid
    try:
        return ipaddress.ip_network(f"{address}/{int(prefix)}", strict=False)
    except ValueError:
        raise invalid from None


def _parse_ip(text: str) -> IPAddress | None:
    if not text or "%" in text or not text.isascii():
        return None
    try:
        address = ipaddress.ip_address(text)
    except ValueError:
        return None
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def to_mac(value: Any) -> bytes | None:
    """Convert to the raw bytes of a MAC address; an empty string gives None."""
    if isinstance(value, str) and not value:
        return None
    return _parse_mac(_text_of(value))


def to_mac_list(value: Any) -> list[bytes] | None:
    """Convert to a list of MAC addresses; an empty string gives None."""
    if isinstance(value, str) and not value:
        return None
    return [_parse_mac(text) for text in _texts_of(value)]


def to_cidr(value: Any) -> IPNetwork | None:
    """Convert to an IP network; host bits of the address are cleared."""
    if value is None:
        return None
    if isinstance(value, _NETWORK_TYPES):
        return value
    if isinstance(value, str) and not value:
        return None
    return _parse_cidr(_text_of(value))


def to_cidr_list(value: Any) -> list[IPNetwork] | None:
    """Convert to a list of IP networks; a single network becomes a one-item list."""
    if value is None:
        return None
    if isinstance(value, _NETWORK_TYPES):
        return [value]
    if isinstance(value, str) and not value:
        return None
    if isinstance(value, (list, tuple)):
        return [
            item if isinstance(item, _NETWORK_TYPES) else _parse_cidr(_lenient_text(item))
            for item in value
        ]
    return [_parse_cidr(text) for text in _texts_of(value)]


def to_ip(value: Any) -> Any:
    """Convert to an IP address.

    IPv4-mapped IPv6 addresses become IPv4 addresses. Text that is not an
    address is handed back unchanged.
    """
    if value is None:
        return None
    if isinstance(value, _ADDRESS_TYPES):
        return value
    if isinstance(value, str) and not value:
        return None
    address = _parse_ip(_text_of(value))
    return value if address is None else address


def to_ip_list(value: Any) -> list[IPAddress | None] | None:
    """Convert to a list of IP addresses.

    Empty entries become None; if any other entry is not an address the whole
    result is None.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value:
        return None
    if isinstance(value, (list, tuple)) and all(
        item is None or isinstance(item, _ADDRESS_TYPES) for item in value
    ):
        return list(value)
    addresses: list[IPAddress | None] = []
    for text in _texts_of(value):
        address = _parse_ip(text)
        if address is None and text:
            return None
        addresses.append(address)
    return addresses