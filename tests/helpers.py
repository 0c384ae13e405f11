"""Shared builders for layer test documents."""
import json

from json_layer_editor.io_utils import encode_compact


def nested_value(levels, encode=encode_compact):
    """A dict carrying `levels - 1` layers of encoded JSON under 'next'."""
    value = {"leaf": True}
    for _ in range(levels - 1):
        value = {"next": encode(value)}
    return value


def three_layer_doc():
    child = {"name": "c", "value": 1}
    parent = {"child": encode_compact(child), "p": True}
    grand = {"parent": encode_compact(parent)}
    return json.dumps(grand)


class FakeEditor:
    """Editor double that fires its change listeners on every set_value."""

    def __init__(self):
        self.value = ''
        self.set_calls = 0
        self.listeners = []

    def on_change(self, callback):
        self.listeners.append(callback)

    def set_value(self, text):
        self.value = text
        self.set_calls += 1
        for callback in self.listeners:
            callback(text)

    def type(self, text):
        self.set_value(text)
