from dataclasses import dataclass, field
from typing import Any

import pytest

from rowforge.extractors import ExtractError
from rowforge.keyed import (
    columns_value_md5,
    md5_of_values,
    parent_column_value,
    parent_primary_keys_id,
    primary_keys_id,
)


@dataclass
class Column:
    column_name: str = ""


@dataclass
class Table:
    table_name: str = ""
    columns: list = field(default_factory=list)
    primary_keys: list = field(default_factory=list)


@dataclass
class Task:
    table: Any = None
    parent_table: Any = None
    parent_row: Any = None


def _table_with(*names, primary_keys=()):
    return Table("t", [Column(name) for name in names], list(primary_keys))


def test_md5_of_values_joins_with_bar():
    assert md5_of_values(["Tom", "3"]) == "b725db465095b4f713647240e78a668d"
    assert md5_of_values(["China", "Tom"]) == "4474bfd8854322bd7c5d347b016f4e23"


def test_columns_value_md5_extract():
    row = {"name": "Tom", "age": 3, "sex": "boy"}
    value = columns_value_md5("name", "age").extract(None, None, Task(table=Table()), row, Column(), None)
    assert value == "b725db465095b4f713647240e78a668d"


def test_columns_value_md5_missing_column():
    with pytest.raises(ExtractError, match="column weight not found"):
        columns_value_md5("weight").extract(None, None, Task(table=Table()), {"name": "Tom"}, Column(), None)


def test_columns_value_md5_dependencies():
    extractor = columns_value_md5("name", "age")
    assert extractor.dependency_column_names(None, None, Table(), Column()) == ["name", "age"]


def test_columns_value_md5_validate_requires_columns():
    with pytest.raises(ExtractError, match="at least one column must be specified"):
        columns_value_md5().validate(None, None, _table_with("name"), Column("id"))


def test_columns_value_md5_validate_unknown_column():
    with pytest.raises(ExtractError, match="column missing not found"):
        columns_value_md5("name", "missing").validate(None, None, _table_with("name"), Column("id"))


def test_columns_value_md5_validate_known_columns():
    assert columns_value_md5("name").validate(None, None, _table_with("name"), Column("id")) is None


def test_parent_column_value_extract():
    task = Task(parent_row={"name": "Tom", "age": 3})
    assert parent_column_value("name").extract(None, None, task, None, None, None) == "Tom"


def test_parent_column_value_without_parent_row():
    with pytest.raises(ExtractError, match="parent row is nil"):
        parent_column_value("name").extract(None, None, Task(), None, None, None)


def test_parent_column_value_missing_column():
    task = Task(parent_row={"name": "Tom"})
    with pytest.raises(ExtractError, match="column age not found"):
        parent_column_value("age").extract(None, None, task, None, None, None)


def test_parent_column_value_validate():
    extractor = parent_column_value("name")
    with pytest.raises(ExtractError, match="parent table is nil"):
        extractor.validate(None, None, Table("child"), Column("c"))
    with pytest.raises(ExtractError, match="parent table not have column name"):
        extractor.validate(None, _table_with("age"), Table("child"), Column("c"))


def test_parent_primary_keys_id_extract():
    parent_table = Table(primary_keys=["country", "name"])
    task = Task(parent_table=parent_table, parent_row={"country": "China", "name": "Tom"})
    value = parent_primary_keys_id().extract(None, None, task, None, None, None)
    assert value == "4474bfd8854322bd7c5d347b016f4e23"


def test_parent_primary_keys_id_errors():
    extractor = parent_primary_keys_id()
    with pytest.raises(ExtractError, match="parent table is nil"):
        extractor.extract(None, None, Task(parent_row={}), None, None, None)
    with pytest.raises(ExtractError, match="parent row is nil"):
        extractor.extract(None, None, Task(parent_table=Table(primary_keys=["a"])), None, None, None)
    with pytest.raises(ExtractError, match="parent table not have primary key"):
        extractor.extract(None, None, Task(parent_table=Table(), parent_row={}), None, None, None)
    with pytest.raises(ExtractError, match="column a not found"):
        extractor.extract(
            None, None, Task(parent_table=Table(primary_keys=["a"]), parent_row={}), None, None, None
        )


def test_parent_primary_keys_id_validate():
    extractor = parent_primary_keys_id()
    with pytest.raises(ExtractError, match="parent table is nil"):
        extractor.validate(None, None, Table(), Column())
    with pytest.raises(ExtractError, match="parent table not have primary key"):
        extractor.validate(None, Table(), Table(), Column())


def test_primary_keys_id_extract():
    table = Table(primary_keys=["country", "name"])
    row = {"country": "China", "name": "Tom"}
    value = primary_keys_id().extract(None, None, Task(table=table), row, None, None)
    assert value == "4474bfd8854322bd7c5d347b016f4e23"


def test_primary_keys_id_without_keys():
    with pytest.raises(ExtractError, match="table not have primary keys"):
        primary_keys_id().extract(None, None, Task(table=Table()), {}, None, None)


def test_primary_keys_id_missing_value():
    table = Table(primary_keys=["country"])
    with pytest.raises(ExtractError, match="column country not found"):
        primary_keys_id().extract(None, None, Task(table=table), {}, None, None)


def test_primary_keys_id_dependencies_and_validate():
    extractor = primary_keys_id()
    table = Table(primary_keys=["country", "name"])
    assert extractor.dependency_column_names(None, None, table, Column()) == ["country", "name"]
    with pytest.raises(ExtractError, match="validate error: table not have primary keys"):
        extractor.validate(None, None, Table(), Column())