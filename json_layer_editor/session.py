"""Editing session: the state a host keeps between calls into the engine.

A session owns the input text, the layer list and any attached views.
A view is any object with `set_value(text)`; if it also has
`on_change(callback)` the session subscribes to it, and the callback is
expected to fire with the new text whenever the view's value changes,
whether a user typed it or the session wrote it. Writes made by the session
happen inside `suppressed()`, and change events arriving during that window
are ignored, so re-rendering a view never counts as a new edit.
"""
from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .config import DEFAULT_INDENT, get_max_depth
from .detector import analyze
from .io_utils import decode_json, encode_pretty
from .layers import Layer, LayerType, breadcrumb, is_valid_index
from .rebuild import rebuild
from .sync import SyncResult, update_layer_content

logger = logging.getLogger(__name__)


class LayerEditError(ValueError):
    """Raised when edited layer text is not valid JSON."""


class LayerSession:
    def __init__(self, max_depth: Optional[int] = None, indent: int = DEFAULT_INDENT):
        self.max_depth = get_max_depth() if max_depth is None else max_depth
        self.indent = indent
        self.input_text = ''
        self.output_text = ''
        self.layers: List[Layer] = []
        self.is_valid_json = False
        self._views: Dict[int, Any] = {}
        self._suppress = 0

    # --- re-entrancy ---

    @contextmanager
    def suppressed(self):
        self._suppress += 1
        try:
            yield
        finally:
            self._suppress -= 1

    @property
    def is_suppressed(self) -> bool:
        return self._suppress > 0

    # --- analysis / output ---

    def analyze(self, text: str) -> List[Layer]:
        self.input_text = text
        self.layers = analyze(text, self.max_depth)
        root = self.layers[0]
        self.is_valid_json = not (root.type is LayerType.STRING and root.content == text)
        logger.info("Analyzed input: %d layer(s)", len(self.layers))
        self.refresh_views()
        return self.layers

    def rebuild(self) -> str:
        self.output_text = rebuild(self.layers, self.indent)
        return self.output_text

    # --- edits ---

    def layer_text(self, index: int) -> str:
        self._check_index(index)
        return encode_pretty(self.layers[index].content, self.indent)

    def edit_layer(self, index: int, text: str) -> SyncResult:
        self._check_index(index)
        try:
            content = decode_json(text)
        except ValueError as exc:
            raise LayerEditError(f"Layer {index} is not valid JSON: {exc}") from exc
        return self.update_layer(index, content)

    def update_layer(self, index: int, content: Any) -> SyncResult:
        self._check_index(index)
        result = update_layer_content(self.layers, index, content)
        if result.stale:
            logger.info("Layer(s) %s could not be re-derived and kept their content", result.stale)
        self.refresh_views(exclude=index)
        return result

    # --- views ---

    def attach_view(self, index: int, view) -> None:
        self._check_index(index)
        self._views[index] = view
        if hasattr(view, 'on_change'):
            view.on_change(lambda text, index=index: self.handle_view_change(index, text))
        with self.suppressed():
            view.set_value(self.layer_text(index))

    def detach_view(self, index: int) -> None:
        self._views.pop(index, None)

    def handle_view_change(self, index: int, text: str) -> Optional[SyncResult]:
        if self.is_suppressed:
            logger.debug("Ignoring programmatic change on layer %d", index)
            return None
        if index not in self._views:
            return None
        try:
            return self.edit_layer(index, text)
        except LayerEditError as exc:
            # Half-typed JSON is normal while editing; wait for the next change.
            logger.debug("%s", exc)
            return None

    def refresh_views(self, exclude: Optional[int] = None) -> None:
        with self.suppressed():
            for index, view in list(self._views.items()):
                if index == exclude:
                    continue
                if not is_valid_index(self.layers, index):
                    self._views.pop(index)
                    continue
                view.set_value(self.layer_text(index))

    # --- inspection / persistence ---

    def breadcrumb(self, index: int) -> str:
        self._check_index(index)
        return breadcrumb(self.layers, index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'input': self.input_text,
            'output': self.output_text,
            'max_depth': self.max_depth,
            'is_valid_json': self.is_valid_json,
            'layers': [layer.to_dict() for layer in self.layers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LayerSession':
        if not isinstance(data, dict) or 'layers' not in data:
            raise ValueError("Session data must be an object with a 'layers' list.")
        session = cls(max_depth=data.get('max_depth'))
        session.input_text = data.get('input', '')
        session.output_text = data.get('output', '')
        session.layers = [Layer.from_dict(record) for record in data['layers']]
        session.is_valid_json = bool(data.get('is_valid_json', bool(session.layers)))
        return session

    def dumps(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def loads(cls, text: str) -> 'LayerSession':
        return cls.from_dict(decode_json(text))

    def _check_index(self, index: int) -> None:
        if not is_valid_index(self.layers, index):
            raise IndexError(f"No layer at index {index}")
