"""Extractors that derive a column's value from other columns or the parent row."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from rowforge.extractors import (
    ColumnValueExtractor,
    ExtractError,
    build_extract_error_message,
    build_validate_error_message,
)
from rowforge.scalars import ConversionError, to_string

_SEPARATOR = " | "


def md5_of_values(values: Iterable[str]) -> str:
    """Hex MD5 digest of ``values`` joined with ``" | "``."""
    joined = _SEPARATOR.join(values)
    return hashlib.md5(joined.encode("utf-8")).hexdigest()


def _primary_keys(table: Any) -> list[str]:
    return list(getattr(table, "primary_keys", None) or [])


def _column_names(table: Any) -> set[str]:
    return {column.column_name for column in getattr(table, "columns", None) or ()}


def _row_value(row: Mapping[str, Any] | None, name: str) -> Any:
    if row is None or name not in row:
        raise KeyError(f"column {name} not found")
    return row[name]


def _row_string(row: Mapping[str, Any] | None, name: str) -> str:
    value = _row_value(row, name)
    try:
        text = to_string(value)
    except ConversionError as error:
        raise KeyError(f"column {name} value can not be read as string: {error}") from None
    return text or ""


def _key_error_text(error: KeyError) -> str:
    return str(error.args[0]) if error.args else str(error)


@dataclass(frozen=True)
class ColumnsValueMd5Extractor(ColumnValueExtractor):
    """MD5 of the values of other columns of the same row, in the given order."""

    column_names: tuple[str, ...]

    name: ClassVar[str] = "columns-value-md5-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        table = getattr(task, "table", None)
        values = []
        for column_name in self.column_names:
            try:
                values.append(_row_string(row, column_name))
            except KeyError as error:
                raise ExtractError(
                    build_extract_error_message(self, table, column, _key_error_text(error))
                ) from None
        return md5_of_values(values)

    def dependency_column_names(self, client_meta, parent_table, table, column):
        return list(self.column_names)

    def validate(self, client_meta, parent_table, table, column):
        messages = []
        if not self.column_names:
            messages.append(
                build_validate_error_message(
                    self, table, column, "at least one column must be specified"
                )
            )
        known = _column_names(table)
        messages.extend(
            build_validate_error_message(self, table, column, f"column {name} not found")
            for name in self.column_names
            if name not in known
        )
        if messages:
            raise ExtractError("\n".join(messages))


@dataclass(frozen=True)
class ParentColumnValueExtractor(ColumnValueExtractor):
    """Takes the value of a column of the parent row."""

    parent_column_name: str

    name: ClassVar[str] = "parent-column-value-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        table = getattr(task, "table", None)
        parent_row = getattr(task, "parent_row", None)
        if parent_row is None:
            raise ExtractError(
                build_extract_error_message(self, table, column, "parent row is nil")
            )
        try:
            return _row_value(parent_row, self.parent_column_name)
        except KeyError as error:
            raise ExtractError(
                build_extract_error_message(self, table, column, _key_error_text(error))
            ) from None

    def validate(self, client_meta, parent_table, table, column):
        if parent_table is None:
            raise ExtractError(
                build_extract_error_message(self, table, column, "parent table is nil")
            )
        if self.parent_column_name not in _column_names(parent_table):
            raise ExtractError(
                build_extract_error_message(
                    self,
                    table,
                    column,
                    f"parent table not have column {self.parent_column_name}",
                )
            )


@dataclass(frozen=True)
class ParentPrimaryKeysIdExtractor(ColumnValueExtractor):
    """MD5 of the primary key values of the parent row."""

    name: ClassVar[str] = "parent-primary-keys-id-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        table = getattr(task, "table", None)
        parent_table = getattr(task, "parent_table", None)
        parent_row = getattr(task, "parent_row", None)
        if parent_table is None:
            raise ExtractError(
                build_extract_error_message(self, table, column, "parent table is nil")
            )
        if parent_row is None:
            raise ExtractError(
                build_extract_error_message(self, table, column, "parent row is nil")
            )
        keys = _primary_keys(parent_table)
        if not keys:
            raise ExtractError(
                build_extract_error_message(
                    self, table, column, "parent table not have primary key"
                )
            )
        values = []
        messages = []
        for key in keys:
            try:
                values.append(_row_string(parent_row, key))
            except KeyError as error:
                messages.append(
                    build_extract_error_message(self, table, column, _key_error_text(error))
                )
        if messages:
            raise ExtractError("\n".join(messages))
        return md5_of_values(values)

    def validate(self, client_meta, parent_table, table, column):
        if parent_table is None:
            raise ExtractError(
                build_extract_error_message(self, table, column, "parent table is nil")
            )
        if not _primary_keys(parent_table):
            raise ExtractError(
                build_extract_error_message(
                    self, table, column, "parent table not have primary key"
                )
            )


@dataclass(frozen=True)
class PrimaryKeysIdExtractor(ColumnValueExtractor):
    """MD5 of the primary key values of the current row."""

    name: ClassVar[str] = "primary-keys-id-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        table = getattr(task, "table", None)
        keys = _primary_keys(table)
        if not keys:
            raise ExtractError(
                build_extract_error_message(self, table, column, "table not have primary keys")
            )
        values = []
        messages = []
        for key in keys:
            try:
                values.append(_row_string(row, key))
            except KeyError as error:
                messages.append(
                    build_extract_error_message(self, table, column, _key_error_text(error))
                )
        if messages:
            raise ExtractError("\n".join(messages))
        return md5_of_values(values)

    def dependency_column_names(self, client_meta, parent_table, table, column):
        return _primary_keys(table)

    def validate(self, client_meta, parent_table, table, column):
        if not _primary_keys(table):
            raise ExtractError(
                build_validate_error_message(self, table, column, "table not have primary keys")
            )


def columns_value_md5(*column_names: str) -> ColumnsValueMd5Extractor:
    """Extractor giving the MD5 of the named columns of the same row."""
    return ColumnsValueMd5Extractor(tuple(column_names))


def parent_column_value(parent_column_name: str) -> ParentColumnValueExtractor:
    """Extractor giving a column of the parent row."""
    return ParentColumnValueExtractor(parent_column_name)


def parent_primary_keys_id() -> ParentPrimaryKeysIdExtractor:
    """Extractor giving the MD5 of the parent row's primary keys."""
    return ParentPrimaryKeysIdExtractor()


def primary_keys_id() -> PrimaryKeysIdExtractor:
    """Extractor giving the MD5 of the row's primary keys."""
    return PrimaryKeysIdExtractor()