"""
Namespace and identity strings for meta nodes.

A namespace is the configuration lookup key of a node: array elements share
their array's namespace, so one entry in the editor options applies to every
element. An identity additionally carries array indices and is unique within
one render pass; it is used as the widget key.
"""

from typing import Any, List, Optional, Sequence

ROOT_NAMESPACE = "root"
SEPARATOR = "_"


def child_namespace(parent_namespace: str, key: Any, parent_is_array: bool) -> str:
    """
    Build the namespace of a child node.

    Args:
        parent_namespace: Namespace of the containing node
        key: Property name or array index of the child
        parent_is_array: True when the child is an array element

    Returns:
        Child namespace
    """
    if parent_is_array:
        return parent_namespace
    return f"{parent_namespace}{SEPARATOR}{key}"


def child_identity(parent_identity: str, key: Any) -> str:
    """Build the render identity of a child node; indices are always appended."""
    return f"{parent_identity}{SEPARATOR}{key}"


def qualified(namespace: str, index: Optional[int]) -> str:
    """Return the index-qualified form of a namespace."""
    return f"{namespace}{SEPARATOR}{index}"


def lookup_keys(namespace: str, index: Optional[int] = None) -> List[str]:
    """
    Configuration keys for a node, most specific first.

    Array elements are looked up by ``namespace_index`` before the bare
    namespace so a single element can be overridden.
    """
    if index is None:
        return [namespace]
    return [qualified(namespace, index), namespace]


def path_identity(path: Sequence[Any]) -> str:
    """Render identity of the node at an explicit value-tree path."""
    identity = ROOT_NAMESPACE
    for segment in path:
        identity = child_identity(identity, segment)
    return identity
