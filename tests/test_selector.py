from types import SimpleNamespace

import pytest

from rowforge.selector import select, underscore_to_upper_camel_case


def test_select_nested_attributes():
    result = SimpleNamespace(Foo=SimpleNamespace(FooValue="foo"))
    assert select(result, "Foo.FooValue") == "foo"


def test_select_leading_dot():
    result = SimpleNamespace(bar=42)
    assert select(result, ".bar") == 42


def test_select_mapping_and_index():
    data = {"items": [{"name": "a"}, {"name": "b"}]}
    assert select(data, "items.1.name") == "b"
    assert select(data, "items.0.name") == "a"


def test_select_missing_gives_none():
    data = {"a": SimpleNamespace(b=None)}
    assert select(data, "a.b.c") is None
    assert select(data, "missing") is None
    assert select(data, "a.nothing") is None


def test_select_out_of_range_and_bad_index():
    data = [1, 2, 3]
    assert select(data, "10") is None
    assert select(data, "x") is None


def test_select_on_none():
    assert select(None, "Foo") is None


def test_select_empty_path_returns_object():
    obj = SimpleNamespace(x=1)
    assert select(obj, "") is obj


@pytest.mark.parametrize(
    "text, expected",
    [("foo_bar", "FooBar"), ("name", "Name"), ("account_id", "AccountId")],
)
def test_underscore_to_upper_camel_case(text, expected):
    assert underscore_to_upper_camel_case(text) == expected


@pytest.mark.parametrize("text", ["foo_bar_baz", "x", "already_Camel", "a_1_b"])
def test_underscore_to_upper_camel_case_invariants(text):
    once = underscore_to_upper_camel_case(text)
    assert "_" not in once
    assert underscore_to_upper_camel_case(once) == once
    assert once[0] == text[0].upper()
    assert once.lower() == text.replace("_", "").lower()