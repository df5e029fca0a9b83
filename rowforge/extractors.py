"""Extractors that pull a column's value out of a pulled result."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar

from rowforge.scalars import ConversionError
from rowforge.selector import select, underscore_to_upper_camel_case
from rowforge.timestamps import TimeFormat, TimeFormatType, to_timestamp


class ExtractError(ValueError):
    """Raised when a column value cannot be extracted or an extractor is misconfigured."""


def _table_name(table: Any) -> str:
    return getattr(table, "table_name", "")


def _column_name(column: Any) -> str:
    return getattr(column, "column_name", "")


def build_extract_error_message(extractor: Any, table: Any, column: Any, message: str) -> str:
    """Describe an extraction failure of ``extractor`` on ``table`` and ``column``."""
    return (
        f"table {_table_name(table)} column {_column_name(column)} "
        f"extractor {extractor.name} extract error: {message}"
    )


def build_validate_error_message(extractor: Any, table: Any, column: Any, message: str) -> str:
    """Describe a validation failure of ``extractor`` on ``table`` and ``column``."""
    return (
        f"table {_table_name(table)} column {_column_name(column)} "
        f"extractor {extractor.name} validate error: {message}"
    )


class ColumnValueExtractor(ABC):
    """Takes the value of one column from a pulled result."""

    name: ClassVar[str] = "column-value-extractor"

    @abstractmethod
    def extract(self, client_meta, client, task, row, column, result):
        """Return the column's value; raise ExtractError when it cannot be had."""

    def dependency_column_names(self, client_meta, parent_table, table, column):
        """Names of columns of the same row that must be filled in first."""
        return []

    def validate(self, client_meta, parent_table, table, column):
        """Check the configuration; raise ExtractError if it cannot work."""
        return None


@dataclass(frozen=True)
class ClientMetaExtractor(ColumnValueExtractor):
    """Takes an item stored on the client meta, or a default when it is absent."""

    item_name: str
    default: Any = None

    name: ClassVar[str] = "client-meta-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        if client_meta is None:
            return self.default
        value = client_meta.get_item(self.item_name)
        return self.default if value is None else value

    def validate(self, client_meta, parent_table, table, column):
        if client_meta is None:
            raise ExtractError(
                build_extract_error_message(self, table, column, "ClientMeta is nil")
            )


@dataclass(frozen=True)
class ConstantExtractor(ColumnValueExtractor):
    """Always gives the same value."""

    value: Any

    name: ClassVar[str] = "constant-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        return self.value


@dataclass(frozen=True)
class DefaultExtractor(ColumnValueExtractor):
    """Selects the column's name from the result, then its UpperCamelCase form."""

    name: ClassVar[str] = "default-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        column_name = _column_name(column)
        if not column_name:
            return None
        value = select(result, column_name)
        if value is not None:
            return value
        return select(result, underscore_to_upper_camel_case(column_name))


@dataclass(frozen=True)
class NilExtractor(ColumnValueExtractor):
    """Always gives None."""

    name: ClassVar[str] = "nil-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        return None


@dataclass(frozen=True)
class ParentResultStructSelectorExtractor(ColumnValueExtractor):
    """Selects a path from the raw result of the parent table's pull."""

    selector: str

    name: ClassVar[str] = "parent-result-struct-selector-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        parent_result = getattr(task, "parent_raw_result", None)
        if parent_result is None:
            return None
        return select(parent_result, self.selector)


@dataclass(frozen=True)
class StructSelectorExtractor(ColumnValueExtractor):
    """Gives the first non-None value among several paths into the result."""

    selectors: tuple[str, ...]

    name: ClassVar[str] = "struct-selector-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        for selector in self.selectors:
            value = select(result, selector)
            if value is not None:
                return value
        return None


@dataclass(frozen=True)
class StructSelectorTimeExtractor(ColumnValueExtractor):
    """Selects a path from the result and converts it to a timestamp."""

    selector: str
    formats: tuple[TimeFormat, ...] = ()

    name: ClassVar[str] = "struct-selector-time-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        value = select(result, self.selector)
        if value is None:
            return None
        try:
            return to_timestamp(value, *self.formats)
        except ConversionError as error:
            raise ExtractError(
                build_extract_error_message(
                    self, getattr(task, "table", None), column, str(error)
                )
            ) from error


@dataclass(frozen=True)
class UuidExtractor(ColumnValueExtractor):
    """Gives a fresh random UUID, by default without hyphens."""

    without_hyphens: bool = True

    name: ClassVar[str] = "uuid-column-value-extractor"

    def extract(self, client_meta, client, task, row, column, result):
        value = uuid.uuid4()
        return value.hex if self.without_hyphens else str(value)


class WrapperExtractor(ColumnValueExtractor):
    """An extractor assembled from plain functions."""

    def __init__(
        self,
        name: str,
        extract: Callable[..., Any] | None = None,
        dependency_column_names: Callable[..., list[str]] | None = None,
        validate: Callable[..., Any] | None = None,
    ) -> None:
        self.name = name
        self._extract = extract
        self._dependency_column_names = dependency_column_names
        self._validate = validate

    def extract(self, client_meta, client, task, row, column, result):
        if self._extract is None:
            return None
        return self._extract(client_meta, client, task, row, column, result)

    def dependency_column_names(self, client_meta, parent_table, table, column):
        if self._dependency_column_names is None:
            return []
        return self._dependency_column_names(client_meta, parent_table, table, column)

    def validate(self, client_meta, parent_table, table, column):
        if self._validate is None:
            return None
        return self._validate(client_meta, parent_table, table, column)

    def __repr__(self) -> str:
        return f"WrapperExtractor(name={self.name!r})"


def client_meta_get_item(item_name: str) -> ClientMetaExtractor:
    """Extractor for an item of the client meta."""
    return ClientMetaExtractor(item_name)


def client_meta_get_item_or_default(item_name: str, default: Any) -> ClientMetaExtractor:
    """Extractor for an item of the client meta, with a fallback value."""
    return ClientMetaExtractor(item_name, default)


def constant(value: Any) -> ConstantExtractor:
    """Extractor that always gives ``value``."""
    return ConstantExtractor(value)


def default() -> DefaultExtractor:
    """Extractor that selects the column's own name from the result."""
    return DefaultExtractor()


DEFAULT_EXTRACTOR = default()


def nil_value() -> NilExtractor:
    """Extractor that always gives None."""
    return NilExtractor()


def parent_result_struct_selector(selector: str) -> ParentResultStructSelectorExtractor:
    """Extractor selecting ``selector`` from the parent's raw result."""
    return ParentResultStructSelectorExtractor(selector)


def struct_selector(*selectors: str) -> StructSelectorExtractor:
    """Extractor giving the first non-None of ``selectors`` in the result."""
    return StructSelectorExtractor(tuple(selectors))


def struct_selector_time(selector: str, *formatters: str) -> StructSelectorTimeExtractor:
    """Timestamp extractor trying the ``strptime`` patterns ``formatters`` first."""
    formats = tuple(TimeFormat(pattern, TimeFormatType.TIME_ONLY) for pattern in formatters)
    return StructSelectorTimeExtractor(selector, formats)


def struct_selector_time_with_formats(
    selector: str, *formats: TimeFormat
) -> StructSelectorTimeExtractor:
    """Timestamp extractor trying ``formats`` first."""
    return StructSelectorTimeExtractor(selector, tuple(formats))


def uuid_extractor(without_hyphens: bool = True) -> UuidExtractor:
    """Extractor giving a random UUID."""
    return UuidExtractor(without_hyphens)


def wrapper(
    name: str,
    extract: Callable[..., Any] | None = None,
    dependency_column_names: Callable[..., list[str]] | None = None,
    validate: Callable[..., Any] | None = None,
) -> WrapperExtractor:
    """Extractor assembled from the given functions."""
    return WrapperExtractor(name, extract, dependency_column_names, validate)


def wrap_extract_function(extract: Callable[..., Any]) -> WrapperExtractor:
    """Extractor made from a single extract function."""
    return wrapper("wrapper-extract-function-column-value-extractor", extract)