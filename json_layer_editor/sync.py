"""Bidirectional synchronization between layers.

An edit to one layer is pushed down (descendants are re-decoded from the
fields that hold them) and up (the layer is re-encoded into its parent's
field, then the parent into its own parent, and so on). Both directions use
explicit work lists and a visited set, so a corrupted parent/child cycle
stops propagation instead of recursing forever.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Set

from .accessors import PathError, get_nested_value, set_nested_value
from .detector import decode_nested
from .io_utils import encode_compact
from .layers import PARSED_FIELD, Layer, LayerType, children_of, is_valid_index, layer_type_of

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    updated: List[int] = field(default_factory=list)
    stale: List[int] = field(default_factory=list)
    cycles: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.stale and not self.cycles


def encoded_form(layer: Layer) -> str:
    """The string a layer occupies inside its parent."""
    if layer.type is LayerType.MAX_DEPTH_REACHED and isinstance(layer.content, str):
        return layer.content
    return encode_compact(layer.content)


def embed_layer(parent: Layer, child: Layer) -> None:
    """Write `child`'s encoded form into `parent.content`.

    A "[parsed]" child replaces the parent's whole content with the encoded
    string, so the parent stays string-typed. Any other child replaces the
    field named by parent_field outright; the parent's content is copied
    first so no container is shared with another layer.
    """
    encoded = encoded_form(child)
    if child.parent_field == PARSED_FIELD:
        parent.content = encoded
        return
    parent.content = set_nested_value(copy.deepcopy(parent.content), child.parent_field, encoded)


def _source_value(parent: Layer, child: Layer) -> Any:
    if child.parent_field == PARSED_FIELD:
        return parent.content
    if not child.parent_field:
        return None
    return get_nested_value(parent.content, child.parent_field)


def _rederive(child: Layer, source: Any) -> bool:
    if not isinstance(source, str):
        return False
    parsed = decode_nested(source)
    if parsed is None:
        return False
    if child.type is LayerType.MAX_DEPTH_REACHED:
        child.content = source
    else:
        child.content = parsed
        child.type = layer_type_of(parsed)
    child.raw_content = source
    child.stale = False
    return True


def _note_cycle(result: SyncResult, index: int, direction: str) -> None:
    logger.warning("Cycle detected at layer %d while propagating %s; branch skipped", index, direction)
    result.cycles.append(index)


def propagate_to_children(
    layers: List[Layer],
    parent_index: int,
    visited: Set[int],
    result: Optional[SyncResult] = None,
) -> SyncResult:
    """Re-decode every descendant of `parent_index` from its parent's field.

    A child whose field no longer holds a decodable string keeps its old
    content and is flagged stale.
    """
    if result is None:
        result = SyncResult()

    pending = [parent_index]
    while pending:
        index = pending.pop()
        if index in visited:
            _note_cycle(result, index, 'down')
            continue
        visited.add(index)
        if not is_valid_index(layers, index):
            continue

        parent = layers[index]
        for child_index in reversed(children_of(layers, index)):
            child = layers[child_index]
            if _rederive(child, _source_value(parent, child)):
                result.updated.append(child_index)
                pending.append(child_index)
            else:
                logger.debug("Layer %d is stale: %r no longer decodes", child_index, child.parent_field)
                child.stale = True
                result.stale.append(child_index)
    return result


def propagate_to_parents(
    layers: List[Layer],
    child_index: int,
    visited: Set[int],
    result: Optional[SyncResult] = None,
) -> SyncResult:
    """Re-embed `child_index` into its parent, then the parent into its own."""
    if result is None:
        result = SyncResult()

    index = child_index
    while True:
        if index in visited:
            _note_cycle(result, index, 'up')
            break
        visited.add(index)

        child = layers[index]
        if not is_valid_index(layers, child.parent_index) or not child.parent_field:
            break
        if child.stale:
            # Its parent's field was replaced on purpose; keep that edit.
            logger.debug("Stopping at stale layer %d", index)
            break

        parent_index = child.parent_index
        try:
            embed_layer(layers[parent_index], child)
        except PathError as exc:
            logger.warning("Cannot embed layer %d into layer %d: %s", index, parent_index, exc)
            child.stale = True
            result.stale.append(index)
            break

        result.updated.append(parent_index)
        index = parent_index
    return result


def update_layer_content(layers: List[Layer], index: int, new_content: Any) -> SyncResult:
    """Replace one layer's content and synchronize the rest of the list.

    Both directions always run: the edited layer may be an ancestor of some
    layers and a descendant of others.
    """
    if not is_valid_index(layers, index):
        raise IndexError(f"No layer at index {index}")

    layer = layers[index]
    layer.content = new_content
    if not (layer.type is LayerType.MAX_DEPTH_REACHED and isinstance(new_content, str)):
        layer.type = layer_type_of(new_content)
    layer.stale = False

    result = SyncResult()
    propagate_to_children(layers, index, set(), result)
    propagate_to_parents(layers, index, set(), result)
    return result
