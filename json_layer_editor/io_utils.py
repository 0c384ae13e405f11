from __future__ import annotations

import json
from typing import Any

from .config import DEFAULT_INDENT


def encode_compact(value: Any) -> str:
    """Encode the way an embedded JSON string is stored: no whitespace."""
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))


def encode_pretty(value: Any, indent: int = DEFAULT_INDENT) -> str:
    return json.dumps(value, ensure_ascii=False, indent=indent)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def decode_json(text: str) -> Any:
    """Decode like JSON.parse: NaN, Infinity and -Infinity are rejected."""
    return json.loads(text, parse_constant=_reject_constant)


def read_json_text(file_obj) -> str:
    """Read raw JSON text from an uploaded file or file path.

    The text is returned undecoded; callers that need to keep invalid
    input around (layer analysis does) decide what to do with it.
    """
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return content

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()
