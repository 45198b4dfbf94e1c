"""
Mutation handlers bound to meta nodes.

Every handler resolves its target through the node's path at call time,
performs one in-place write, and only then emits a MutationEvent so the host
re-renders from a fully mutated tree.
"""

import copy
import inspect
from typing import Any, Callable, Optional
import logging

from .editor_options import EditorOptions
from .events import MutationChannel, MutationEvent, MutationType
from .type_classifier import NodeKind, is_container
from .value_tree import ValueTree

logger = logging.getLogger(__name__)

# Element appended by the automatic add of an empty flat array
EMPTY_SCALAR_ITEM = ""


def call_delete_handler(handler: Callable[..., Any], parent: Any, slot: Any) -> Any:
    """Call a delete handler with the parent, adding the index or key when it takes one."""
    try:
        inspect.signature(handler).bind(parent, slot)
    except (TypeError, ValueError):
        return handler(parent)
    return handler(parent, slot)


class HandlerFactory:
    """Builds set/delete/add callbacks for meta nodes of one value tree."""

    def __init__(self, tree: ValueTree, options: EditorOptions,
                 channel: Optional[MutationChannel] = None):
        self.tree = tree
        self.options = options
        self.channel = channel

    def setter(self, node) -> Callable[[Any], None]:
        """Return a callback writing an already-coerced value at the node's slot."""
        path = node.path
        namespace = node.namespace

        def set_value(value: Any) -> None:
            self.tree.set(path, value)
            logger.info(f"Set {namespace} at {list(path)} -> {value!r}")
            self._notify(MutationType.SET, namespace, path)

        return set_value

    def deleter(self, node) -> Optional[Callable[[], None]]:
        """
        Return the delete callback for a node, or None when it is not deletable.

        Array elements are always deletable: a configured handler receives the
        parent array, otherwise the element is spliced out. Containers reached
        by key are deletable only through a configured handler, which receives
        the parent container. Handlers that accept a second argument also get
        the element index or the key.
        """
        path = node.path
        namespace = node.namespace

        if node.index is not None:
            handler = self.options.delete_handler_for(namespace, node.index)
            index = node.index

            def delete_element() -> None:
                if handler is not None:
                    call_delete_handler(handler, self.tree.parent_of(path), index)
                else:
                    self.tree.delete(path)
                logger.info(f"Deleted element {index} of {namespace}")
                self._notify(MutationType.DELETE, namespace, path)

            return delete_element

        if is_container(node.kind) and path:
            handler = self.options.delete_handler_for(namespace)
            if handler is None:
                return None
            key = node.key

            def delete_member() -> None:
                call_delete_handler(handler, self.tree.parent_of(path), key)
                logger.info(f"Deleted member {key!r} via configured handler for {namespace}")
                self._notify(MutationType.DELETE, namespace, path)

            return delete_member

        return None

    def adder(self, node) -> Optional[Callable[[], None]]:
        """
        Return the add callback for an array container, or None.

        A factory registered for the namespace receives the live array and is
        responsible for appending. Flat arrays of scalars without a factory
        get a copy of their first element appended (an empty string when the
        array is empty). Array elements never carry an add callback.
        """
        if node.kind != NodeKind.ARRAY or node.index is not None:
            return None

        path = node.path
        namespace = node.namespace
        factory = self.options.add_factory_for(namespace)

        if factory is not None:
            def add_from_factory() -> None:
                factory(self.tree.get(path))
                logger.info(f"Added item to {namespace} via configured factory")
                self._notify(MutationType.ADD, namespace, path)

            return add_from_factory

        if node.nested:
            return None

        def add_scalar() -> None:
            target = self.tree.get(path)
            item = copy.deepcopy(target[0]) if len(target) > 0 else EMPTY_SCALAR_ITEM
            position = self.tree.append(path, item)
            logger.info(f"Added item {position} to {namespace}")
            self._notify(MutationType.ADD, namespace, path)

        return add_scalar

    def _notify(self, mutation: str, namespace: str, path) -> None:
        if self.channel is not None:
            self.channel.emit(MutationEvent(mutation, namespace, tuple(path)))
