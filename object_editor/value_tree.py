"""
Path-addressed access to the caller's live value tree.

Meta nodes never hold a reference to the value they describe; they carry the
path of keys and indices from the root, and every read and write goes through
ValueTree. Mutations are destructive and in place: no nested structure is ever
copied.
"""

from typing import Any, Sequence, Tuple
import logging

from .exceptions import ValuePathError
from .type_classifier import NodeKind, classify

logger = logging.getLogger(__name__)

Path = Tuple[Any, ...]


class ValueTree:
    """Wraps the root of a value tree and resolves explicit paths against it."""

    def __init__(self, root: Any):
        self.root = root

    def get(self, path: Sequence[Any]) -> Any:
        """Return the value at path; the empty path is the root."""
        current = self.root
        for position, segment in enumerate(path):
            current = self._step(current, segment, path, position)
        return current

    def parent_of(self, path: Sequence[Any]) -> Any:
        """Return the container holding the value at path."""
        if not path:
            raise ValuePathError(path, 0, "the root has no parent")
        return self.get(path[:-1])

    def set(self, path: Sequence[Any], value: Any) -> None:
        """Write value at path, replacing whatever is there."""
        parent = self.parent_of(path)
        key = path[-1]
        self._check_slot(parent, key, path, allow_new_key=True)
        parent[key] = value

    def delete(self, path: Sequence[Any]) -> Any:
        """
        Remove the value at path.

        Array elements are spliced out so later siblings shift down by one;
        object members are removed by key.

        Returns:
            The removed value
        """
        parent = self.parent_of(path)
        key = path[-1]
        self._check_slot(parent, key, path, allow_new_key=False)
        removed = parent[key]
        del parent[key]
        return removed

    def append(self, path: Sequence[Any], value: Any) -> int:
        """
        Append value to the array at path.

        Returns:
            Index of the appended element
        """
        target = self.get(path)
        if classify(target) != NodeKind.ARRAY:
            raise ValuePathError(path, len(path), "target is not an array")
        if isinstance(target, tuple):
            raise ValuePathError(path, len(path), "tuples cannot be mutated in place")
        target.append(value)
        return len(target) - 1

    @staticmethod
    def _step(current: Any, segment: Any, path: Sequence[Any], position: int) -> Any:
        kind = classify(current)
        if kind == NodeKind.OBJECT:
            if segment not in current:
                raise ValuePathError(path, position, f"missing key {segment!r}")
            return current[segment]
        if kind == NodeKind.ARRAY:
            if not isinstance(segment, int) or not 0 <= segment < len(current):
                raise ValuePathError(path, position, f"index {segment!r} out of range")
            return current[segment]
        raise ValuePathError(path, position, f"cannot descend into a {kind}")

    @staticmethod
    def _check_slot(parent: Any, key: Any, path: Sequence[Any], allow_new_key: bool) -> None:
        kind = classify(parent)
        position = len(path) - 1
        if kind == NodeKind.ARRAY:
            if not isinstance(key, int) or not 0 <= key < len(parent):
                raise ValuePathError(path, position, f"index {key!r} out of range")
            if isinstance(parent, tuple):
                raise ValuePathError(path, position, "tuples cannot be mutated in place")
        elif kind == NodeKind.OBJECT:
            if not allow_new_key and key not in parent:
                raise ValuePathError(path, position, f"missing key {key!r}")
        else:
            raise ValuePathError(path, position, f"parent is a {kind}")
