"""Single-document JSON tools: format, minify, validate, escape, sort.

Format and minify are best effort: when the input does not decode they fall
back to a character-level pass that only rearranges whitespace outside of
string literals, so a broken document can still be made readable.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .config import DEFAULT_INDENT
from .io_utils import decode_json, encode_compact, encode_pretty

STRICT = 'strict'
LOOSE = 'loose'

_STRUCTURAL = set('{}[],:')
_WHITESPACE = set(' \t\n\r')


@dataclass
class BestEffortResult:
    output: str
    mode: str = STRICT
    reason: Optional[str] = None


def _next_significant(source: str, start: int) -> str:
    for ch in source[start:]:
        if ch not in _WHITESPACE:
            return ch
    return ''


def _keeps_space(prev: str, nxt: str) -> bool:
    # A run of whitespace between two bare tokens (e.g. `true false`) is kept
    # as one space so the tokens do not merge.
    if not prev or not nxt:
        return False
    return prev not in _STRUCTURAL and nxt not in _STRUCTURAL


def format_loosely(text: str, indent: int = DEFAULT_INDENT) -> str:
    source = text.strip()
    if not source:
        return ''

    unit = ' ' * max(indent, 0)
    level = 0
    newline_pending = False
    in_string = False
    escaped = False
    last = ''
    out: List[str] = []

    def newline():
        nonlocal last
        out.append('\n' + unit * max(level, 0))
        last = ''

    for i, ch in enumerate(source):
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
                last = '"'
            continue

        if ch == '"':
            if newline_pending:
                newline()
                newline_pending = False
            in_string = True
            out.append(ch)
            last = '"'
            continue

        if ch in _WHITESPACE:
            if _keeps_space(last, _next_significant(source, i + 1)) and not (out and out[-1].endswith(' ')):
                out.append(' ')
            continue

        if ch in '}]':
            level = max(level - 1, 0)
            newline()
            out.append(ch)
            newline_pending = True
            last = ch
            continue

        if newline_pending:
            newline()
            newline_pending = False

        if ch in '{[':
            out.append(ch)
            level += 1
            newline_pending = True
        elif ch == ',':
            out.append(ch)
            newline_pending = True
        elif ch == ':':
            out.append(': ')
        else:
            out.append(ch)
        last = ch

    return ''.join(out).strip()


def minify_loosely(text: str) -> str:
    source = text.strip()
    if not source:
        return ''

    in_string = False
    escaped = False
    last = ''
    out: List[str] = []

    for i, ch in enumerate(source):
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
                last = '"'
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            last = '"'
            continue

        if ch in _WHITESPACE:
            if _keeps_space(last, _next_significant(source, i + 1)) and not (out and out[-1].endswith(' ')):
                out.append(' ')
            continue

        out.append(ch)
        last = ch

    return ''.join(out)


def format_json_best_effort(text: str, indent: int = DEFAULT_INDENT) -> BestEffortResult:
    if not text or not text.strip():
        return BestEffortResult(output='')
    try:
        return BestEffortResult(output=encode_pretty(decode_json(text), indent))
    except ValueError as exc:
        return BestEffortResult(output=format_loosely(text, indent), mode=LOOSE, reason=str(exc))


def minify_json_best_effort(text: str) -> BestEffortResult:
    if not text or not text.strip():
        return BestEffortResult(output='')
    try:
        return BestEffortResult(output=encode_compact(decode_json(text)))
    except ValueError as exc:
        return BestEffortResult(output=minify_loosely(text), mode=LOOSE, reason=str(exc))


def validate_json(text: str) -> Tuple[bool, str]:
    try:
        decode_json(text)
    except ValueError as exc:
        return False, f"Invalid JSON: {exc}"
    return True, "Valid JSON."


def escape_json(text: str) -> str:
    """Encode a JSON document as a JSON string literal (validates first)."""
    decode_json(text)
    return json.dumps(text, ensure_ascii=False)


def unescape_json(text: str, indent: int = DEFAULT_INDENT) -> str:
    value = decode_json(text)
    if isinstance(value, str):
        return value
    return encode_pretty(value, indent)


def _sorted(value: Any) -> Any:
    if isinstance(value, list):
        return [_sorted(v) for v in value]
    if isinstance(value, dict):
        return {k: _sorted(value[k]) for k in sorted(value)}
    return value


def sort_keys(text: str, indent: int = DEFAULT_INDENT) -> str:
    return encode_pretty(_sorted(decode_json(text)), indent)
