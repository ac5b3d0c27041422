"""Flatten nested JSON structures into dotted/indexed property keys.

Objects contribute ``parent.child`` keys and arrays contribute
``parent[index]`` keys. Leaves (strings, numbers, booleans and null) are
recorded in depth-first order, each wrapped in an ``OriginTrackedValue``.
Traversal uses an explicit stack, so nesting depth is not bounded by the
interpreter's recursion limit.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .origin import OriginTrackedValue, PropertySourceOrigin


def flatten(
    data: Mapping[str, Any],
    origin: Optional[PropertySourceOrigin] = None,
) -> Dict[str, OriginTrackedValue]:
    """Flatten ``data`` using period separators and bracketed indexes.

    Args:
        data: Decoded JSON object.
        origin: Layer and property the JSON was read from, attached to every
            value.

    Returns:
        Ordered mapping of flattened key to tracked value. Colliding keys keep
        the value written last.
    """
    result: Dict[str, OriginTrackedValue] = {}
    stack: List[Iterator[Tuple[str, Any]]] = [_children(None, data)]
    while stack:
        try:
            name, value = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        if _is_container(value):
            stack.append(_children(name, value))
        else:
            result[name] = OriginTrackedValue(value, origin)
    return result


def flatten_values(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten ``data`` and drop provenance."""
    return {key: tracked.value for key, tracked in flatten(data).items()}


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _children(name: Optional[str], value: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(value, Mapping):
        prefix = "" if name is None else name + "."
        return ((f"{prefix}{key}", item) for key, item in value.items())
    return ((f"{name}[{index}]", item) for index, item in enumerate(value))
