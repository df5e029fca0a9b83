# rowforge

rowforge turns the raw results returned by a data source into rows of a
table. For every column an *extractor* pulls the value out of a result, and a
*convertor* coerces that value into the column's storage type. A
*transformer* runs both over all columns of a table, in dependency order, and
collects the failures without losing the rest of the row.

## Installation

```
pip install rowforge
```

Python 3.10 or later is required. The package has no runtime dependencies.

## Conversion functions

- `rowforge.scalars`: `to_small_int` (16-bit, wrapping), `to_int` and
  `to_big_int` (64-bit), `to_float`, `to_bool`, `to_string`, `to_byte`,
  `to_bytes`, `to_int_list`, `to_string_list` and `trim_zero_decimal`.
  Integer conversions accept strings with a base prefix (`"0x1f"`) and a
  zero-only decimal part (`"10.00"`). An empty string gives `None`. Failures
  raise `ConversionError`, a subclass of `ValueError`.
- `rowforge.timestamps`: `to_timestamp(value, *formats)` accepts datetimes,
  Unix seconds, strings in many common layouts (tried after any `TimeFormat`
  objects you pass), and objects with a `strftime` method. `TimeFormat` pairs
  a `strptime` pattern with a `TimeFormatType`; layouts without a numeric
  offset are read as local time. `parse_date_with(text, location, formats)`
  tries the given formats in order.
- `rowforge.network`: `to_ip`, `to_ip_list`, `to_cidr`, `to_cidr_list`
  (results from the `ipaddress` module), `to_mac` and `to_mac_list` (raw
  bytes). IPv4-mapped IPv6 addresses become IPv4 addresses.
- `rowforge.json_values`: `to_json_string` and `to_json`. A plain string that
  does not start with `{` or `[` becomes a one-element JSON array; bytes are
  taken as JSON text; anything else is serialised compactly.

```python
from rowforge.scalars import to_int, to_bool
from rowforge.timestamps import to_timestamp
from rowforge.json_values import to_json_string

to_int("1")                        # 1
to_bool("true")                    # True
to_timestamp("2022-10-24T08:01Z")  # datetime for 2022-10-24 08:01:00, local time
to_json_string("foobar")           # '["foobar"]'
```

## The column convertor

`rowforge.convertor.DefaultColumnValueConvertor(client_meta=None, blacklist=())`
converts a value by its column's `ColumnType` (`SMALL_INT`, `INT`,
`INT_ARRAY`, `BIG_INT`, `FLOAT`, `BOOL`, `STRING`, `STRING_ARRAY`,
`BYTE_ARRAY`, `TIMESTAMP`, `JSON`, `IP`, `IP_ARRAY`, `CIDR`, `CIDR_ARRAY`,
`MAC_ADDR`, `MAC_ADDR_ARRAY`). Strings in `blacklist`, such as `"N/A"`, become
`None` for every column that is not a string column; `is_blacklisted(column,
value)` tells whether that applies. `convert(table, column, value)` raises
`ConversionError` naming the table and column when the value cannot be
converted. Unexpected failures are passed to `client_meta.error` when the
client meta has one, and logged otherwise.

## Extractors

`rowforge.extractors` defines the `ColumnValueExtractor` base class, with
`extract(client_meta, client, task, row, column, result)`,
`dependency_column_names(...)` and `validate(...)`, and the ready-made
extractors, built through factory functions:

| Factory | Value produced |
| --- | --- |
| `default()` | the field named like the column, or its UpperCamelCase form |
| `struct_selector(*paths)` | the first non-`None` value found at one of the paths |
| `struct_selector_time(path, *patterns)` | the value at a path, as a timestamp |
| `struct_selector_time_with_formats(path, *formats)` | as above, with `TimeFormat` objects |
| `parent_result_struct_selector(path)` | a value from `task.parent_raw_result` |
| `constant(value)` | always the same value |
| `nil_value()` | always `None` |
| `client_meta_get_item(name)` / `client_meta_get_item_or_default(name, default)` | `client_meta.get_item(name)`, or the default |
| `uuid_extractor(without_hyphens=True)` | a fresh random UUID |
| `wrapper(name, extract, dependency_column_names, validate)` / `wrap_extract_function(fn)` | your own functions |

`rowforge.keyed` adds extractors that derive identifiers:
`columns_value_md5(*names)` (MD5 of other columns of the same row),
`primary_keys_id()` (MD5 of the row's primary keys),
`parent_primary_keys_id()` (MD5 of the parent row's primary keys) and
`parent_column_value(name)`. `md5_of_values(values)` is the hash they share:
the hex MD5 of the values joined with `" | "`.

Extractors signal failures by raising `ExtractError`;
`build_extract_error_message` and `build_validate_error_message` format the
messages.

Paths are handled by `rowforge.selector.select(obj, path)`, which walks
attributes, mapping keys and sequence indexes (`"Foo.FooValue"`, `".bar"`,
`"items.0"`) and gives `None` for anything missing.
`underscore_to_upper_camel_case` turns `snake_case` into `UpperCamelCase`.

## The transformer

`rowforge.transformer.Transformer(client_meta=None, type_convertor=None,
ignore_cell_errors=False)` builds one row from one result with
`transform_result(client, task, result)`, returning a dict keyed by column
name. Columns are filled in the order their extractors'
`dependency_column_names` require; a column without an extractor uses
`default()`. Without a convertor, `DefaultColumnValueConvertor` is used.

A failing cell is reported, left `None`, and its message collected; at the
end `TransformError` is raised with `errors` (the messages) and `row` (what
was filled in). With `ignore_cell_errors=True` failing cells are left `None`
and no error is raised for them. An empty table, a `None` result or columns
that depend on each other also raise `TransformError`.

```python
from dataclasses import dataclass, field
from typing import Any

from rowforge.convertor import ColumnType
from rowforge.extractors import struct_selector
from rowforge.keyed import primary_keys_id
from rowforge.transformer import Transformer


@dataclass
class Column:
    column_name: str
    type: ColumnType
    extractor: Any = None


@dataclass
class Table:
    table_name: str
    columns: list
    primary_keys: list = field(default_factory=list)


@dataclass
class Task:
    table: Table
    task_id: str = "1"


table = Table(
    "user",
    [
        Column("name", ColumnType.STRING),
        Column("age", ColumnType.BIG_INT, struct_selector("Age")),
        Column("id", ColumnType.STRING, primary_keys_id()),
    ],
    primary_keys=["name"],
)
row = Transformer().transform_result(None, Task(table), {"name": "Tom", "Age": "3"})
# {"name": "Tom", "age": 3, "id": <hex MD5 of "Tom">}
```

## What the package does not do

rowforge defines no table, column, task or client-meta types of its own. You
supply objects with the attributes it reads: tables with `table_name`,
`columns` and `primary_keys`; columns with `column_name`, `type` and
`extractor`; tasks with `table` and, where used, `task_id`, `parent_table`,
`parent_row` and `parent_raw_result`; rows as mappings. It does not fetch data
from any source, store rows anywhere, or call `validate` on extractors for
you, and it has no command-line interface.

## Running the tests

```
pip install -e ".[test]"
pytest
```