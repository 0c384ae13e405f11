"""Core logic for JSON Layer Editor.

The Gradio UI lives in `app.py`. This package contains the engine that:
- detects escaped JSON-within-JSON layers
- synchronizes edits between layers in both directions
- rebuilds the edited layers into one document
- reads and writes values by dot/bracket path
"""
from .accessors import PathError, get_nested_value, set_nested_value
from .detector import analyze
from .layers import PARSED_FIELD, Layer, LayerType
from .rebuild import rebuild
from .session import LayerEditError, LayerSession
from .sync import SyncResult, update_layer_content

__all__ = [
    'PARSED_FIELD',
    'Layer',
    'LayerEditError',
    'LayerSession',
    'LayerType',
    'PathError',
    'SyncResult',
    'analyze',
    'get_nested_value',
    'rebuild',
    'set_nested_value',
    'update_layer_content',
]
