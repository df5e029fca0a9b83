"""Conversion of extracted values to the type their column stores."""

from __future__ import annotations

import logging
import traceback
from enum import Enum
from typing import Any, Callable, Iterable

from rowforge.json_values import to_json
from rowforge.network import (
    to_cidr,
    to_cidr_list,
    to_ip,
    to_ip_list,
    to_mac,
    to_mac_list,
)
from rowforge.scalars import (
    ConversionError,
    to_big_int,
    to_bool,
    to_bytes,
    to_float,
    to_int,
    to_int_list,
    to_small_int,
    to_string,
    to_string_list,
)
from rowforge.timestamps import to_timestamp

_logger = logging.getLogger(__name__)


class ColumnType(str, Enum):
    """The storage types a column can have."""

    SMALL_INT = "smallint"
    INT = "int"
    INT_ARRAY = "int_array"
    BIG_INT = "bigint"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    STRING_ARRAY = "string_array"
    BYTE_ARRAY = "byte_array"
    TIMESTAMP = "timestamp"
    JSON = "json"
    IP = "ip"
    IP_ARRAY = "ip_array"
    CIDR = "cidr"
    CIDR_ARRAY = "cidr_array"
    MAC_ADDR = "mac_addr"
    MAC_ADDR_ARRAY = "mac_addr_array"


_CONVERTERS: dict[ColumnType, Callable[[Any], Any]] = {
    ColumnType.SMALL_INT: to_small_int,
    ColumnType.INT: to_int,
    ColumnType.INT_ARRAY: to_int_list,
    ColumnType.BIG_INT: to_big_int,
    ColumnType.FLOAT: to_float,
    ColumnType.BOOL: to_bool,
    ColumnType.STRING: to_string,
    ColumnType.STRING_ARRAY: to_string_list,
    ColumnType.BYTE_ARRAY: to_bytes,
    ColumnType.TIMESTAMP: to_timestamp,
    ColumnType.JSON: to_json,
    ColumnType.IP: to_ip,
    ColumnType.IP_ARRAY: to_ip_list,
    ColumnType.CIDR: to_cidr,
    ColumnType.CIDR_ARRAY: to_cidr_list,
    ColumnType.MAC_ADDR: to_mac,
    ColumnType.MAC_ADDR_ARRAY: to_mac_list,
}


class DefaultColumnValueConvertor:
    """Converts values by column type, mapping placeholder strings to None.

    ``blacklist`` holds strings, such as ``"N/A"``, that an API returns in place
    of a missing value; they become None for every column that is not a string.
    Unexpected failures are reported to ``client_meta.error`` when it has one.
    """

    def __init__(self, client_meta: Any = None, blacklist: Iterable[str] = ()) -> None:
        self.client_meta = client_meta
        self.blacklist = frozenset(blacklist)

    def is_blacklisted(self, column: Any, value: Any) -> bool:
        """Whether ``value`` is a placeholder string for a non-string column."""
        if column.type == ColumnType.STRING:
            return False
        return isinstance(value, str) and value in self.blacklist

    def _report(self, message: str) -> None:
        report = getattr(self.client_meta, "error", None)
        if callable(report):
            report(message)
        else:
            _logger.error(message)

    def convert(self, table: Any, column: Any, value: Any) -> Any:
        """Convert ``value`` to the type of ``column``.

        Raises ConversionError, naming the table and column, when it cannot.
        """
        if value is None or self.is_blacklisted(column, value):
            return None
        converter = _CONVERTERS.get(column.type)
        if converter is None:
            return None
        try:
            return converter(value)
        except ConversionError as error:
            raise ConversionError(
                f"table {table.table_name} column {column.column_name} "
                f"type convert error: {error}"
            ) from error
        except Exception as error:
            type_name = getattr(column.type, "value", column.type)
            message = (
                f"table {table.table_name} column {column.column_name} convert panic: "
                f"{error}, unable to cast {value!r} of type {type(value).__name__} "
                f"to {type_name}"
            )
            self._report(f"{message}\nStack: \n{traceback.format_exc()}")
            raise ConversionError(message) from error