from __future__ import annotations

import logging
import os
import tempfile
from typing import List, Optional

import gradio as gr

from .accessors import PathError
from .io_utils import read_json_text
from .layers import Layer, layer_label
from .paths import INDEX_RE
from .session import LayerEditError, LayerSession

logger = logging.getLogger(__name__)


def layer_choice(index: int, layer: Layer) -> str:
    label = f"{index}: {layer_label(layer)} ({layer.type.value})"
    if layer.stale:
        label += " [stale]"
    return label


def layer_choices(layers: List[Layer]) -> List[str]:
    return [layer_choice(i, layer) for i, layer in enumerate(layers)]


def parse_layer_choice(choice) -> Optional[int]:
    if choice is None:
        return None
    if isinstance(choice, int):
        return choice
    head = str(choice).split(':', 1)[0].strip()
    return int(head) if INDEX_RE.fullmatch(head) else None


def _layer_dropdown(session: LayerSession, index: int = 0):
    choices = layer_choices(session.layers)
    value = choices[index] if 0 <= index < len(choices) else None
    return gr.update(choices=choices, value=value, interactive=bool(choices))


def _empty_dropdown():
    return gr.update(choices=[], value=None, interactive=False)


def load_input_file_handler(file_obj):
    if file_obj is None:
        return gr.update(), "No file uploaded."
    try:
        text = read_json_text(file_obj)
    except Exception as e:
        return gr.update(), f"Error reading file: {str(e)}"
    return text, "File loaded. Click Analyze to detect layers."


def analyze_input_handler(text, max_depth):
    if not text or not text.strip():
        return None, _empty_dropdown(), "", "", "Input is empty."

    try:
        session = LayerSession(max_depth=int(max_depth) if max_depth is not None else None)
        session.analyze(text)
    except ValueError as e:
        return None, _empty_dropdown(), "", "", f"Error: {str(e)}"

    if not session.is_valid_json:
        status = "Input is not valid JSON; it is shown as a single raw string layer."
    else:
        truncated = sum(1 for layer in session.layers if layer.is_truncated)
        status = f"Found {len(session.layers)} layer(s)."
        if truncated:
            status += f" Maximum depth {session.max_depth} reached; {truncated} value(s) left unparsed."

    return session, _layer_dropdown(session, 0), session.layer_text(0), session.breadcrumb(0), status


def select_layer_handler(session, choice):
    index = parse_layer_choice(choice)
    if session is None or index is None or not 0 <= index < len(session.layers):
        return "", ""
    return session.layer_text(index), session.breadcrumb(index)


def apply_layer_edit_handler(session, choice, text):
    index = parse_layer_choice(choice)
    if session is None or index is None:
        return session, gr.update(), gr.update(), "Analyze an input and select a layer first."

    try:
        result = session.edit_layer(index, text)
    except LayerEditError as e:
        return session, gr.update(), gr.update(), str(e)
    except IndexError as e:
        return session, gr.update(), gr.update(), f"Error: {str(e)}"

    status = f"Layer {index} applied; {len(set(result.updated))} related layer(s) updated."
    if result.stale:
        status += f" Could not re-derive layer(s) {sorted(set(result.stale))}; they kept their previous content."
    if result.cycles:
        status += f" Propagation stopped at a cycle (layer(s) {sorted(set(result.cycles))})."
    return session, _layer_dropdown(session, index), session.layer_text(index), status


def generate_output_handler(session):
    if session is None or not session.layers:
        return "", "Analyze an input first."
    try:
        output = session.rebuild()
    except PathError as e:
        return "", f"Error generating output: {str(e)}"
    return output, "Output generated."


def apply_output_to_input_handler(output):
    if not output or not output.strip():
        return gr.update(), "Output is empty; nothing to apply."
    return output, "Output copied to input. Click Analyze to re-detect layers."


def export_layers_handler(session, file_name):
    if session is None or not session.layers:
        return None, "No layers to export."

    output_name = (file_name or "layers").strip()
    if not output_name.lower().endswith('.json'):
        output_name += '.json'

    temp_dir = tempfile.gettempdir()
    path = os.path.join(temp_dir, output_name)

    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(session.dumps())
    except Exception as e:
        return None, f"Error writing layers file: {str(e)}"

    return path, f"Exported {len(session.layers)} layer(s) to {path}"


def import_layers_handler(file_obj):
    if file_obj is None:
        return None, gr.update(), _empty_dropdown(), "", "", "No file uploaded."

    try:
        session = LayerSession.loads(read_json_text(file_obj))
    except Exception as e:
        return None, gr.update(), _empty_dropdown(), "", "", f"Error importing layers: {str(e)}"

    if not session.layers:
        return session, session.input_text, _empty_dropdown(), "", "", "Imported session has no layers."

    return (
        session,
        session.input_text,
        _layer_dropdown(session, 0),
        session.layer_text(0),
        session.breadcrumb(0),
        f"Imported {len(session.layers)} layer(s).",
    )
