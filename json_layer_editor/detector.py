"""Detection of escaped JSON-within-JSON.

`analyze` decodes a document and walks it looking for string values that
are themselves JSON objects or arrays. Each one becomes a Layer, appended in
pre-order so that a parent always precedes its descendants.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from .config import DEFAULT_MAX_DEPTH
from .io_utils import decode_json
from .layers import PARSED_FIELD, Layer, LayerType, layer_type_of
from .paths import join_path

logger = logging.getLogger(__name__)

Container = Union[dict, list]


def _has_matching_brackets(text: str) -> bool:
    return (text.startswith('{') and text.endswith('}')) or (
        text.startswith('[') and text.endswith(']')
    )


def try_unescape(text: str) -> str:
    """Undo one level of literal backslash escaping (double-escaped producers)."""
    return text.replace('\\"', '"').replace('\\\\', '\\')


def is_likely_json(value: Any) -> bool:
    """Cheap pre-check before attempting a decode.

    False positives are expected; they are rejected by `decode_nested`.
    """
    if not isinstance(value, str):
        return False
    trimmed = value.strip()
    if _has_matching_brackets(trimmed):
        return True
    if '\\"' in trimmed or '\\\\' in trimmed:
        return _has_matching_brackets(try_unescape(trimmed).strip())
    return False


def decode_nested(text: str) -> Optional[Container]:
    """Decode `text` into an object or array, or return None.

    Scalars never count: a string holding `123` or `true` is not a layer.
    """
    try:
        parsed = decode_json(text)
    except ValueError:
        try:
            parsed = decode_json(try_unescape(text))
        except ValueError:
            return None
    if isinstance(parsed, (dict, list)):
        return parsed
    return None


class _LayerScanner:
    """Per-call scan state. Nothing survives past one `analyze` call."""

    def __init__(self, layers: List[Layer], max_depth: int):
        self.layers = layers
        self.max_depth = max_depth
        self.warned = False

    def scan(self, index: int) -> None:
        content = self.layers[index].content
        if isinstance(content, str):
            self._consider(content, index, PARSED_FIELD)
        else:
            self._walk(content, index, '')

    def _walk(self, value: Any, owner: int, path: str) -> None:
        if isinstance(value, dict):
            items = value.items()
        elif isinstance(value, list):
            items = enumerate(value)
        else:
            return

        for key, item in items:
            item_path = join_path(path, key)
            if isinstance(item, str):
                self._consider(item, owner, item_path)
            else:
                self._walk(item, owner, item_path)

    def _consider(self, text: str, owner: int, parent_field: str) -> None:
        if not is_likely_json(text):
            return
        parsed = decode_nested(text)
        if parsed is None:
            return

        depth = self.layers[owner].depth + 1
        if depth >= self.max_depth:
            self._truncate(text, owner, parent_field, depth)
            return

        child = Layer(
            depth=depth,
            content=parsed,
            type=layer_type_of(parsed),
            parent_index=owner,
            parent_field=parent_field,
            raw_content=text,
        )
        child_index = self._append(child, owner)
        logger.debug("Layer %d at depth %d from %r of layer %d", child_index, depth, parent_field, owner)
        self.scan(child_index)

    def _truncate(self, text: str, owner: int, parent_field: str, depth: int) -> None:
        if not self.warned:
            self.warned = True
            logger.warning(
                "Maximum depth of %d layers reached. Deeper layers will not be parsed.",
                self.max_depth,
            )
        sentinel = Layer(
            depth=depth,
            content=text,
            type=LayerType.MAX_DEPTH_REACHED,
            parent_index=owner,
            parent_field=parent_field,
            raw_content=text,
        )
        self._append(sentinel, owner)

    def _append(self, layer: Layer, owner: int) -> int:
        self.layers.append(layer)
        index = len(self.layers) - 1
        self.layers[owner].child_indices.append(index)
        return index


def analyze(root_input: str, max_depth: int = DEFAULT_MAX_DEPTH) -> List[Layer]:
    """Detect every escaped JSON layer in `root_input`.

    Invalid JSON is not an error: the result is a single string layer holding
    the raw input. Candidates whose depth would reach `max_depth` are kept as
    unparsed `max-depth-reached` layers and one warning is logged per call.
    """
    if max_depth < 0:
        raise ValueError("max_depth must be >= 0")

    try:
        parsed = decode_json(root_input)
    except (TypeError, ValueError):
        logger.debug("Input is not valid JSON; keeping it as a raw string layer")
        return [
            Layer(
                depth=0,
                content=root_input,
                type=LayerType.STRING,
                raw_content=root_input,
            )
        ]

    layers = [
        Layer(
            depth=0,
            content=parsed,
            type=layer_type_of(parsed),
            raw_content=root_input,
        )
    ]
    _LayerScanner(layers, max_depth).scan(0)
    logger.debug("Detected %d layer(s)", len(layers))
    return layers
