from __future__ import annotations

from typing import Any, Tuple

from .paths import INDEX_RE, Segment, split_path


class PathError(ValueError):
    """Raised when a path cannot be written into the given container."""


def _as_index(segment: Segment):
    if isinstance(segment, int) and not isinstance(segment, bool):
        return segment
    if isinstance(segment, str) and INDEX_RE.fullmatch(segment):
        return int(segment)
    return None


def _lookup(container: Any, segment: Segment) -> Tuple[bool, Any]:
    if isinstance(container, dict):
        key = segment if isinstance(segment, str) else str(segment)
        if key in container:
            return True, container[key]
        return False, None
    if isinstance(container, list):
        index = _as_index(segment)
        if index is not None and index < len(container):
            return True, container[index]
        return False, None
    return False, None


def _assign(container: Any, segment: Segment, value: Any, path: str) -> None:
    if isinstance(container, dict):
        key = segment if isinstance(segment, str) else str(segment)
        container[key] = value
        return

    if isinstance(container, list):
        index = _as_index(segment)
        if index is None:
            raise PathError(f"Cannot use key {segment!r} on an array (path {path!r})")
        if index < len(container):
            container[index] = value
        else:
            container.extend([None] * (index - len(container)))
            container.append(value)
        return

    raise PathError(
        f"Cannot set {segment!r} on a {type(container).__name__} value (path {path!r})"
    )


def get_nested_value(data: Any, path: str, default: Any = None) -> Any:
    """Retrieve a value from nested data using a dot/bracket path.

    Returns `default` as soon as a segment is missing. An empty path
    returns `data` itself.
    """
    val = data
    for segment in split_path(path):
        found, val = _lookup(val, segment)
        if not found:
            return default
    return val


def set_nested_value(data: Any, path: str, value: Any) -> Any:
    """Set a value in nested data by dot/bracket path.

    Missing intermediate containers are created (a list when the next
    segment is an index, a dict otherwise). An existing intermediate that
    is not a container raises PathError rather than being overwritten.
    Returns `data`, or `value` when the path is empty.
    """
    parts = split_path(path)
    if not parts:
        return value

    current = data
    for part, nxt in zip(parts[:-1], parts[1:]):
        if not isinstance(current, (dict, list)):
            raise PathError(
                f"Cannot descend into a {type(current).__name__} value (path {path!r})"
            )
        found, child = _lookup(current, part)
        if not found:
            child = [] if isinstance(nxt, int) else {}
            _assign(current, part, child, path)
        elif not isinstance(child, (dict, list)):
            raise PathError(
                f"Field {part!r} holds a {type(child).__name__}, "
                f"cannot hold {nxt!r} (path {path!r})"
            )
        current = child

    _assign(current, parts[-1], value, path)
    return data
