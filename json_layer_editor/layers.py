"""Layer model: one detected JSON value plus its place in the containment tree.

Layers live in a flat list. Relationships are expressed by index
(`parent_index`, `child_indices`) and by `parent_field`, the path inside the
parent's content where the layer's encoded string is stored.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .io_utils import decode_json

PARSED_FIELD = '[parsed]'
ROOT_LABEL = 'root'


class LayerType(str, Enum):
    OBJECT = 'object'
    ARRAY = 'array'
    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    NULL = 'null'
    MAX_DEPTH_REACHED = 'max-depth-reached'


def layer_type_of(value: Any) -> LayerType:
    if value is None:
        return LayerType.NULL
    if isinstance(value, bool):
        return LayerType.BOOLEAN
    if isinstance(value, (int, float)):
        return LayerType.NUMBER
    if isinstance(value, str):
        return LayerType.STRING
    if isinstance(value, list):
        return LayerType.ARRAY
    if isinstance(value, dict):
        return LayerType.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


@dataclass
class Layer:
    depth: int
    content: Any
    type: LayerType
    parent_index: int = -1
    parent_field: Optional[str] = None
    raw_content: Optional[str] = None
    child_indices: List[int] = field(default_factory=list)
    # Set when the parent's field could no longer be decoded into this layer.
    stale: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent_index < 0

    @property
    def is_truncated(self) -> bool:
        return self.type is LayerType.MAX_DEPTH_REACHED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'depth': self.depth,
            'content': self.content,
            'type': self.type.value,
            'parent_index': self.parent_index,
            'parent_field': self.parent_field,
            'raw_content': self.raw_content,
            'child_indices': list(self.child_indices),
            'stale': self.stale,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Layer':
        if not isinstance(data, dict):
            raise ValueError(f"Layer record must be an object, got {type(data).__name__}")
        missing = [k for k in ('depth', 'content', 'type') if k not in data]
        if missing:
            raise ValueError(f"Layer record is missing {', '.join(missing)}")
        return cls(
            depth=int(data['depth']),
            content=data['content'],
            type=LayerType(data['type']),
            parent_index=int(data.get('parent_index', -1)),
            parent_field=data.get('parent_field'),
            raw_content=data.get('raw_content'),
            child_indices=[int(i) for i in data.get('child_indices') or []],
            stale=bool(data.get('stale', False)),
        )


def layers_to_json(layers: List[Layer], indent: Optional[int] = None) -> str:
    return json.dumps([layer.to_dict() for layer in layers], ensure_ascii=False, indent=indent)


def layers_from_json(text: str) -> List[Layer]:
    records = decode_json(text)
    if not isinstance(records, list):
        raise ValueError("Persisted layers must be a JSON array.")
    return [Layer.from_dict(record) for record in records]


def is_valid_index(layers: List[Layer], index: int) -> bool:
    return isinstance(index, int) and 0 <= index < len(layers)


def children_of(layers: List[Layer], index: int) -> List[int]:
    """Indices of layers whose parent_index points at `index`.

    Derived from parent_index rather than child_indices so that a list
    edited by hand still propagates to every dependent layer.
    """
    return [i for i, layer in enumerate(layers) if layer.parent_index == index]


def ancestor_chain(layers: List[Layer], index: int) -> List[int]:
    """Root-first list of indices from the top ancestor down to `index`."""
    chain: List[int] = []
    seen = set()
    current = index
    while is_valid_index(layers, current) and current not in seen:
        seen.add(current)
        chain.append(current)
        current = layers[current].parent_index
    chain.reverse()
    return chain


def layer_label(layer: Layer) -> str:
    if layer.is_root or not layer.parent_field:
        return ROOT_LABEL
    return layer.parent_field


def breadcrumb(layers: List[Layer], index: int, sep: str = ' > ') -> str:
    return sep.join(layer_label(layers[i]) for i in ancestor_chain(layers, index))
