"""
Runtime shape classification for schema-less value trees.
This is the only place in the editor that inspects raw Python types; everything
downstream switches on the returned NodeKind.
"""

from collections.abc import Mapping
from typing import Any


class NodeKind:
    """Node kind constants."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


CONTAINER_KINDS = (NodeKind.OBJECT, NodeKind.ARRAY)


def classify(value: Any) -> str:
    """
    Classify a value into one of the five editable kinds.

    Lists and tuples are arrays, mappings are objects. bool is checked before
    int because bool is an int subclass. Anything else (None, dates, custom
    objects) is edited as a string.

    Args:
        value: Any JSON-like value

    Returns:
        One of the NodeKind constants
    """
    if isinstance(value, (list, tuple)):
        return NodeKind.ARRAY
    if isinstance(value, Mapping):
        return NodeKind.OBJECT
    if isinstance(value, bool):
        return NodeKind.BOOLEAN
    if isinstance(value, (int, float)):
        return NodeKind.NUMBER
    return NodeKind.STRING


def is_container(kind: str) -> bool:
    """Return True for object and array kinds."""
    return kind in CONTAINER_KINDS


def members(value: Any) -> list:
    """Return the (key, member) pairs of a container in iteration order."""
    if classify(value) == NodeKind.OBJECT:
        return list(value.items())
    return list(enumerate(value))


def contains_nested(value: Any) -> bool:
    """
    Check whether a container holds at least one object or array among its
    immediate members. Only one level is inspected.
    """
    return any(is_container(classify(member)) for _, member in members(value))
