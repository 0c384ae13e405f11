import pytest

from json_layer_editor.paths import escape_path_segment, join_path, split_path


@pytest.mark.parametrize(
    "path, expected",
    [
        ("key", ["key"]),
        ("key.sub", ["key", "sub"]),
        ("key[3]", ["key", 3]),
        ("[0].key", [0, "key"]),
        ("a.b[2].c", ["a", "b", 2, "c"]),
        ("matrix[1][2]", ["matrix", 1, 2]),
        ("", []),
        (None, []),
    ],
)
def test_split_path(path, expected):
    assert split_path(path) == expected


def test_split_path_escaped_dot_stays_in_segment():
    assert split_path("responses.gpt-3\\.5-turbo.text") == ["responses", "gpt-3.5-turbo", "text"]


def test_split_path_unclosed_bracket_is_literal():
    assert split_path("a[b") == ["a[b"]


def test_split_path_numeric_dot_segment_stays_string():
    assert split_path("a.3") == ["a", "3"]


def test_join_path():
    assert join_path("", "a") == "a"
    assert join_path("a", "b") == "a.b"
    assert join_path("a", 0) == "a[0]"
    assert join_path("", 0) == "[0]"
    assert join_path("a", "b.c") == "a.b\\.c"


def test_escape_path_segment():
    assert escape_path_segment("a[1]") == "a\\[1\\]"
    assert escape_path_segment("back\\slash") == "back\\\\slash"


def test_joined_path_splits_back_into_awkward_keys():
    segments = ["a.b", 0, "c[d]", "", "back\\slash", "plain"]
    path = ""
    for segment in segments:
        path = join_path(path, segment)
    assert split_path(path) == segments


def test_empty_key_has_its_own_segment():
    assert join_path("", "") == '[""]'
    assert join_path("a", "") == 'a[""]'
    assert split_path('[""]') == [""]
    assert split_path('a[""].b') == ["a", "", "b"]


def test_empty_key_is_not_dropped_from_dotted_path():
    assert split_path(join_path(join_path("a", ""), 0)) == ["a", "", 0]
