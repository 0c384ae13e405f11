import json

import pytest

from json_layer_editor.formatter import (
    LOOSE,
    STRICT,
    escape_json,
    format_json_best_effort,
    minify_json_best_effort,
    sort_keys,
    unescape_json,
    validate_json,
)


def test_format_strict():
    result = format_json_best_effort('{"a":1}')
    assert result.mode == STRICT
    assert result.output == '{\n  "a": 1\n}'
    assert result.reason is None


def test_format_loose_reindents_broken_json():
    result = format_json_best_effort('{"a":1,"b":[1,2')
    assert result.mode == LOOSE
    assert result.reason
    assert result.output == '{\n  "a": 1,\n  "b": [\n    1,\n    2'


def test_format_loose_leaves_strings_alone():
    result = format_json_best_effort('{"a b": "x , y: {z}"')
    assert result.mode == LOOSE
    assert '"x , y: {z}"' in result.output


def test_minify_strict():
    result = minify_json_best_effort('{ "a" : [1, 2] }')
    assert result.mode == STRICT
    assert result.output == '{"a":[1,2]}'


def test_minify_loose():
    result = minify_json_best_effort('{ "a" : [1, 2 }')
    assert result.mode == LOOSE
    assert result.output == '{"a":[1,2}'


def test_minify_loose_keeps_bare_tokens_apart():
    assert minify_json_best_effort("true   false").output == "true false"


@pytest.mark.parametrize("fn", [format_json_best_effort, minify_json_best_effort])
def test_blank_input(fn):
    result = fn("   ")
    assert result.output == ""
    assert result.mode == STRICT


def test_validate_json():
    assert validate_json('{"a": 1}') == (True, "Valid JSON.")
    assert not validate_json("NaN")[0]
    assert not validate_json('{"a": Infinity}')[0]
    ok, message = validate_json("{")
    assert not ok
    assert message.startswith("Invalid JSON")


def test_escape_json():
    assert escape_json('{"a":1}') == '"{\\"a\\":1}"'
    with pytest.raises(ValueError):
        escape_json("{")


def test_unescape_json():
    assert unescape_json('"{\\"a\\":1}"') == '{"a":1}'
    assert unescape_json('{"a":1}') == '{\n  "a": 1\n}'


def test_sort_keys():
    result = json.loads(sort_keys('{"b": 1, "a": {"d": 1, "c": [{"z": 0, "y": 1}]}}'))
    assert list(result) == ["a", "b"]
    assert list(result["a"]) == ["c", "d"]
    assert list(result["a"]["c"][0]) == ["y", "z"]
