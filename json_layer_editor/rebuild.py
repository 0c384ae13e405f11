from __future__ import annotations

import copy
import dataclasses
import logging
from typing import List, Set

from .config import DEFAULT_INDENT
from .io_utils import encode_pretty
from .layers import Layer
from .sync import embed_layer

logger = logging.getLogger(__name__)


def _stale_branches(layers: List[Layer]) -> Set[int]:
    """Stale layers plus everything below them.

    Their parents' fields already hold whatever replaced them, so folding
    them back would undo that edit.
    """
    skipped: Set[int] = set()
    for index, layer in enumerate(layers):
        if layer.stale or (0 <= layer.parent_index < index and layer.parent_index in skipped):
            skipped.add(index)
    return skipped


def rebuild(layers: List[Layer], indent: int = DEFAULT_INDENT) -> str:
    """Fold every layer back into the root and return the pretty-printed result.

    Works on copies; `layers` is left untouched. Layers are folded from the
    last index down, which is correct because every parent precedes its
    children in the list. Stale layers and their descendants are left out.
    """
    if not layers:
        return '{}'

    working = [dataclasses.replace(layer, content=copy.deepcopy(layer.content)) for layer in layers]
    skipped = _stale_branches(working)

    for index in range(len(working) - 1, 0, -1):
        layer = working[index]
        if index in skipped:
            logger.debug("Skipping stale layer %d", index)
            continue
        if not 0 <= layer.parent_index < index or not layer.parent_field:
            logger.debug("Skipping layer %d: no earlier parent to fold into", index)
            continue
        embed_layer(working[layer.parent_index], layer)

    return encode_pretty(working[0].content, indent)
