from __future__ import annotations

import re
from typing import List, Union

Segment = Union[str, int]

_SPECIAL_CHARS = ('\\', '.', '[', ']')
INDEX_RE = re.compile(r'[0-9]+')
# An empty key has no dotted spelling, so it is written as a quoted bracket.
EMPTY_KEY_SEGMENT = '[""]'


def escape_path_segment(segment: str) -> str:
    """Escape a single key segment for dot/bracket path representation.

    - Dots and brackets are escaped so keys like 'gpt-3.5-turbo' or 'a[1]'
      remain one segment.
    - Backslashes are escaped as '\\\\' to preserve round-tripping.
    """
    if not isinstance(segment, str):
        segment = str(segment)
    for ch in _SPECIAL_CHARS:
        segment = segment.replace(ch, '\\' + ch)
    return segment


def join_path(parent: str, segment: Segment) -> str:
    """Append a key (str) or an index (int) to an existing path."""
    if isinstance(segment, int) and not isinstance(segment, bool):
        return f"{parent}[{segment}]"
    if segment == '':
        return f"{parent}{EMPTY_KEY_SEGMENT}"
    escaped = escape_path_segment(segment)
    return f"{parent}.{escaped}" if parent else escaped


def split_path(path: str) -> List[Segment]:
    """Split a dot/bracket path into segments.

    'a.b[2].c' -> ['a', 'b', 2, 'c'] and '[0].key' -> [0, 'key'].
    Bracketed digits become ints; '[""]' is the empty key; everything else
    stays a string key.
    Backslash escapes the next character.
    """
    if path is None:
        return []
    if not isinstance(path, str):
        path = str(path)

    parts: List[Segment] = []
    buf: List[str] = []
    escaping = False

    def flush():
        if buf:
            parts.append(''.join(buf))
            buf.clear()

    i = 0
    while i < len(path):
        ch = path[i]
        if escaping:
            buf.append(ch)
            escaping = False
        elif ch == '\\':
            escaping = True
        elif ch == '.':
            flush()
        elif ch == '[':
            end = path.find(']', i + 1)
            if end == -1:
                # Unclosed bracket; treat as literal.
                buf.append(ch)
            else:
                flush()
                token = path[i + 1:end]
                if INDEX_RE.fullmatch(token):
                    parts.append(int(token))
                elif token == '""':
                    parts.append('')
                elif token:
                    parts.append(token)
                i = end + 1
                continue
        else:
            buf.append(ch)
        i += 1

    if escaping:
        # Trailing backslash; treat as literal.
        buf.append('\\')

    flush()
    return parts
