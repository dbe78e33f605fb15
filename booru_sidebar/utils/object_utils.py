"""
Shallow sync between a live UI object graph and a plain snapshot.

A node is any object exposing an ``objectName`` attribute; everything else
is treated as a value.
"""
from typing import Any


# Framework bookkeeping that must not end up in a snapshot
SKIPPED_PREFIXES = (
    "objectName",
    "children",
    "object",
    "parent",
    "metaObject",
    "destroyed",
    "reloadableId",
)

PRIMITIVES = (str, int, float, bool, bytes)


def _is_snapshot_key(key: Any, value: Any) -> bool:
    if not isinstance(key, str):
        return True
    if key.startswith(SKIPPED_PREFIXES):
        return False
    return not callable(value)


def _public_attributes(node: Any) -> dict[str, Any]:
    attributes = {}
    for name in dir(node):
        if name.startswith("_"):
            continue
        attributes[name] = getattr(node, name)
    return attributes


def is_node(value: Any) -> bool:
    """Check whether value is a UI node rather than a plain value."""
    if value is None or isinstance(value, (PRIMITIVES, list, tuple, dict)):
        return False
    return hasattr(value, "objectName")


def to_plain_object(node: Any) -> Any:
    """
    Recursively convert a node (or value) into plain lists, dicts and primitives.

    Callables and framework bookkeeping attributes are dropped.
    """
    if node is None or isinstance(node, PRIMITIVES):
        return node

    if isinstance(node, (list, tuple)):
        return [to_plain_object(item) for item in node]

    items = node if isinstance(node, dict) else _public_attributes(node)
    return {
        key: to_plain_object(value)
        for key, value in items.items()
        if _is_snapshot_key(key, value)
    }


def apply_to_object(node: Any, value: Any) -> None:
    """
    Apply a plain snapshot onto an existing node.

    Only keys the node already has are written. Child nodes are updated in
    place; everything else (primitives, lists, plain dicts) is assigned
    directly.
    """
    if not node or not isinstance(value, dict):
        return

    for key, new_value in value.items():
        if isinstance(node, dict):
            if key not in node:
                continue
            current = node[key]
        else:
            if not isinstance(key, str) or not hasattr(node, key):
                continue
            current = getattr(node, key)

        if is_node(current):
            apply_to_object(current, new_value)
        elif isinstance(node, dict):
            node[key] = new_value
        else:
            setattr(node, key, new_value)
