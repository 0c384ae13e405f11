from __future__ import annotations

from .formatter import (
    LOOSE,
    escape_json,
    format_json_best_effort,
    minify_json_best_effort,
    sort_keys,
    unescape_json,
    validate_json,
)

ACTIONS = ["Format", "Minify", "Validate", "Escape", "Unescape", "Sort keys"]


def _best_effort_status(result, verb):
    if result.mode == LOOSE:
        return f"{verb} (loose mode, input is not valid JSON: {result.reason})"
    return f"{verb}."


def process_json_handler(text, action):
    if not text or not text.strip():
        return "", "Input is empty."

    if action == "Format":
        result = format_json_best_effort(text)
        return result.output, _best_effort_status(result, "Formatted")
    if action == "Minify":
        result = minify_json_best_effort(text)
        return result.output, _best_effort_status(result, "Minified")
    if action == "Validate":
        ok, message = validate_json(text)
        return (text if ok else ""), message

    handlers = {
        "Escape": escape_json,
        "Unescape": unescape_json,
        "Sort keys": sort_keys,
    }
    fn = handlers.get(action)
    if fn is None:
        return "", f"Unknown action: {action}"
    try:
        return fn(text), f"{action} done."
    except ValueError as e:
        return "", f"Error: {str(e)}"
