from dataclasses import dataclass, field
from typing import Any

import pytest

from rowforge.convertor import ColumnType
from rowforge.extractors import constant, struct_selector, wrapper
from rowforge.keyed import columns_value_md5
from rowforge.transformer import TransformError, Transformer


@dataclass
class Column:
    column_name: str
    type: ColumnType = ColumnType.STRING
    extractor: Any = None


@dataclass
class Table:
    table_name: str = "users"
    columns: list = field(default_factory=list)
    primary_keys: list = field(default_factory=list)


@dataclass
class Task:
    table: Any
    task_id: str = "task-1"
    parent_table: Any = None
    parent_row: Any = None
    parent_raw_result: Any = None


class FakeClientMeta:
    def __init__(self):
        self.messages = []

    def error(self, message):
        self.messages.append(message)


@dataclass
class User:
    Name: str
    UserId: int


def _transformer(**kwargs):
    return Transformer(FakeClientMeta(), **kwargs)


def test_transform_converts_values():
    table = Table(columns=[Column("name"), Column("age", ColumnType.BIG_INT)])
    row = _transformer().transform_result(None, Task(table), {"name": "Tom", "age": "3"})
    assert row == {"name": "Tom", "age": 3}


def test_transform_fills_dependencies_first():
    table = Table(
        columns=[
            Column("id", extractor=columns_value_md5("name", "age")),
            Column("name"),
            Column("age", ColumnType.BIG_INT),
        ]
    )
    row = _transformer().transform_result(None, Task(table), {"name": "Tom", "age": 3})
    assert list(row) == ["name", "age", "id"]
    assert row["id"] == "b725db465095b4f713647240e78a668d"


def test_default_extractor_falls_back_to_camel_case():
    table = Table(columns=[Column("user_id", ColumnType.INT), Column("name", extractor=struct_selector("Name"))])
    row = _transformer().transform_result(None, Task(table), User("Tom", 7))
    assert row == {"user_id": 7, "name": "Tom"}


def test_empty_table_is_rejected():
    with pytest.raises(TransformError, match="table users transformer error: table columns are empty"):
        _transformer().transform_result(None, Task(Table()), {"a": 1})


def test_missing_result_is_rejected():
    table = Table(columns=[Column("name")])
    with pytest.raises(TransformError, match="result must not nil"):
        _transformer().transform_result(None, Task(table), None)


def test_conversion_error_fails_row_and_keeps_partial_values():
    meta = FakeClientMeta()
    table = Table(columns=[Column("name"), Column("age", ColumnType.BIG_INT)])
    with pytest.raises(TransformError) as info:
        Transformer(meta).transform_result(None, Task(table), {"name": "Tom", "age": "abc"})
    assert info.value.row == {"name": "Tom", "age": None}
    assert len(info.value.errors) == 1
    assert "column age type convert error" in info.value.errors[0]
    assert any("taskId = task-1" in message for message in meta.messages)


def test_ignored_cell_errors_leave_none():
    table = Table(columns=[Column("name"), Column("age", ColumnType.BIG_INT)])
    row = _transformer(ignore_cell_errors=True).transform_result(
        None, Task(table), {"name": "Tom", "age": "abc"}
    )
    assert row == {"name": "Tom", "age": None}


def test_unexpected_extractor_failure_is_reported():
    def explode(*args):
        raise RuntimeError("boom")

    meta = FakeClientMeta()
    table = Table(columns=[Column("name", extractor=wrapper("exploding", explode))])
    with pytest.raises(TransformError, match="extractor exploding extract error: boom"):
        Transformer(meta).transform_result(None, Task(table), {"name": "Tom"})
    assert any("Stack:" in message for message in meta.messages)


def test_duplicate_column_names_are_reported():
    table = Table(columns=[Column("name", extractor=constant("a")), Column("name", extractor=constant("b"))])
    with pytest.raises(TransformError, match="column name already exists") as info:
        _transformer().transform_result(None, Task(table), {"x": 1})
    assert info.value.row == {"name": "a"}


def test_cyclic_dependencies_are_rejected():
    table = Table(
        columns=[
            Column("a", extractor=columns_value_md5("b")),
            Column("b", extractor=columns_value_md5("a")),
        ]
    )
    with pytest.raises(TransformError, match="columns depend on each other: a, b"):
        _transformer().transform_result(None, Task(table), {"x": 1})