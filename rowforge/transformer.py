"""Turning one pulled result into a row of column values."""

from __future__ import annotations

import logging
import traceback
from typing import Any, Iterable

from rowforge.convertor import DefaultColumnValueConvertor
from rowforge.extractors import DEFAULT_EXTRACTOR, ExtractError
from rowforge.scalars import ConversionError

_logger = logging.getLogger(__name__)


class TransformError(ValueError):
    """Raised when a result cannot be turned into a row.

    ``errors`` holds one message per failure; ``row`` holds what could be
    filled in, with None for the cells that failed.
    """

    def __init__(self, errors: Iterable[str], row: dict[str, Any] | None = None) -> None:
        self.errors = list(errors)
        self.row = row
        super().__init__("\n".join(self.errors))


def _type_name(column: Any) -> str:
    column_type = getattr(column, "type", None)
    return str(getattr(column_type, "value", column_type))


class Transformer:
    """Extracts each column of a table from a result and converts it for storage.

    Columns are filled in dependency order, so an extractor may read columns it
    declares through ``dependency_column_names``. With ``ignore_cell_errors`` a
    failing cell is left None instead of failing the row.
    """

    def __init__(
        self,
        client_meta: Any = None,
        type_convertor: Any = None,
        ignore_cell_errors: bool = False,
    ) -> None:
        self.client_meta = client_meta
        self.type_convertor = type_convertor or DefaultColumnValueConvertor(client_meta)
        self.ignore_cell_errors = ignore_cell_errors

    def _report(self, message: str) -> None:
        report = getattr(self.client_meta, "error", None)
        if callable(report):
            report(message)
        else:
            _logger.error(message)

    @staticmethod
    def _message(table: Any, column: Any, message: str) -> str:
        parts = []
        if table is not None:
            parts.append(f"table {table.table_name} ")
        if column is not None:
            parts.append(f"column {column.column_name} ")
        parts.append(f"transformer error: {message}")
        return "".join(parts)

    def _sorted_columns(self, task: Any) -> list[Any]:
        table = task.table
        columns = list(getattr(table, "columns", None) or ())
        names = {column.column_name for column in columns}
        parent_table = getattr(task, "parent_table", None)
        pending = []
        for column in columns:
            extractor = column.extractor or DEFAULT_EXTRACTOR
            dependencies = extractor.dependency_column_names(
                self.client_meta, parent_table, table, column
            ) or []
            pending.append((column, {name for name in dependencies if name in names}))
        placed: set[str] = set()
        ordered = []
        while pending:
            ready = next((entry for entry in pending if entry[1] <= placed), None)
            if ready is None:
                stuck = ", ".join(entry[0].column_name for entry in pending)
                raise TransformError(
                    [self._message(table, None, f"columns depend on each other: {stuck}")]
                )
            pending = [entry for entry in pending if entry is not ready]
            ordered.append(ready[0])
            placed.add(ready[0].column_name)
        return ordered

    def _extract_column(self, client: Any, task: Any, column: Any, row: dict, result: Any) -> Any:
        extractor = column.extractor or DEFAULT_EXTRACTOR
        try:
            value = extractor.extract(self.client_meta, client, task, row, column, result)
        except (ExtractError, ConversionError):
            raise
        except Exception as error:
            message = (
                f"table {task.table.table_name} column {column.column_name} "
                f"extractor {extractor.name} extract error: {error}, unable to extract "
                f"{result!r} of type {type(result).__name__} to {_type_name(column)}"
            )
            self._report(f"{message}\nStack: \n{traceback.format_exc()}")
            raise ExtractError(message) from error
        return self.type_convertor.convert(task.table, column, value)

    def transform_result(self, client: Any, task: Any, result: Any) -> dict[str, Any]:
        """Build the row for ``result``, keyed by column name in fill order."""
        table = task.table
        columns = self._sorted_columns(task)
        if not columns:
            raise TransformError([self._message(table, None, "table columns are empty")])
        if result is None:
            raise TransformError([self._message(table, None, "result must not nil")])

        row: dict[str, Any] = {}
        errors: list[str] = []
        for column in columns:
            name = column.column_name
            if name in row:
                errors.append(self._message(table, column, f"column {name} already exists"))
                continue
            try:
                value = self._extract_column(client, task, column, row, result)
            except (ExtractError, ConversionError) as error:
                self._report(
                    f"taskId = {getattr(task, 'task_id', '')}, table {table.table_name} "
                    f"column {name} transformer error: {error}"
                    f"\n row result raw value: {result!r}"
                    f"\nStack: \n{''.join(traceback.format_stack())}"
                )
                value = None
                if not self.ignore_cell_errors:
                    errors.append(str(error))
            row[name] = value

        if errors:
            raise TransformError(errors, row)
        return row