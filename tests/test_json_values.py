from dataclasses import dataclass

import pytest

from rowforge.json_values import to_json, to_json_string
from rowforge.scalars import ConversionError

JSON_STRING = '{"Bar":"bar"}'


@dataclass
class Foo:
    Bar: str


def test_bytes():
    assert to_json(JSON_STRING.encode()) == JSON_STRING


def test_bytearray():
    assert to_json(bytearray(JSON_STRING.encode())) == JSON_STRING


def test_struct():
    assert to_json(Foo(Bar="bar")) == '{"Bar":"bar"}'


def test_string():
    assert to_json(JSON_STRING) == JSON_STRING


def test_none():
    assert to_json(None) is None


def test_plain_string_wrapped_in_array():
    assert to_json_string("foobar") == '["foobar"]'


def test_json_like_string_is_trimmed():
    assert to_json_string("  [1,2] ") == "[1,2]"


def test_mapping_serialised_compactly():
    assert to_json({"a": 1, "b": [True, None]}) == '{"a":1,"b":[true,null]}'


def test_empty_bytes_give_none():
    assert to_json(b"") is None


def test_unserialisable_value():
    with pytest.raises(ConversionError):
        to_json(object())