import pytest

from json_layer_editor.accessors import PathError, get_nested_value, set_nested_value


@pytest.fixture
def data():
    return {"a": {"b": [10, {"c": "x"}]}, "n": None}


def test_get_nested_value(data):
    assert get_nested_value(data, "a.b[1].c") == "x"
    assert get_nested_value(data, "a.b[0]") == 10
    assert get_nested_value(data, "n") is None


def test_get_nested_value_missing(data):
    assert get_nested_value(data, "a.missing") is None
    assert get_nested_value(data, "a.b[5]", default="d") == "d"
    assert get_nested_value(data, "a.b[0].deeper", default="d") == "d"


def test_get_nested_value_empty_path_returns_container(data):
    assert get_nested_value(data, "") is data


def test_get_nested_value_root_array():
    assert get_nested_value([{"key": 1}], "[0].key") == 1


def test_set_nested_value_creates_intermediates():
    data = {}
    result = set_nested_value(data, "a.b[0].c", 1)
    assert result is data
    assert data == {"a": {"b": [{"c": 1}]}}


def test_set_nested_value_replaces_whole_field():
    data = {"x": '{"old":1}', "keep": True}
    set_nested_value(data, "x", '{"new":2}')
    assert data == {"x": '{"new":2}', "keep": True}


def test_set_nested_value_pads_arrays():
    data = []
    set_nested_value(data, "[2]", "v")
    assert data == [None, None, "v"]


def test_set_nested_value_empty_path_returns_value():
    assert set_nested_value({"a": 1}, "", "v") == "v"


@pytest.mark.parametrize(
    "data, path",
    [
        ({"a": 5}, "a.b"),
        ({"a": "text"}, "a[0]"),
        ({"a": None}, "a.b"),
        ([1, 2], "x"),
        ("text", "a"),
    ],
)
def test_set_nested_value_refuses_primitives(data, path):
    with pytest.raises(PathError):
        set_nested_value(data, path, "v")


def test_path_error_is_value_error():
    with pytest.raises(ValueError):
        set_nested_value({"a": 1}, "a.b", 2)


def test_non_ascii_digits_are_not_indices():
    with pytest.raises(PathError):
        set_nested_value([1], "²", "v")
    assert get_nested_value([1], "²", default="d") == "d"


def test_empty_key_path():
    data = {"": {"x": 1}}
    assert get_nested_value(data, '[""].x') == 1
    set_nested_value(data, '[""]', "v")
    assert data == {"": "v"}
