"""
Meta-model builder for arbitrary value trees.

TreeWalker walks an unknown-shape JSON-like value and produces a parallel tree
of MetaNode objects, one per editable unit. The meta tree is rebuilt from
scratch on every render and discarded afterwards; only the namespace and
identity strings carry over between renders.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
import logging

from .editor_options import EditorOptions
from .handlers import HandlerFactory
from .namespace import ROOT_NAMESPACE, child_identity, child_namespace
from .type_classifier import NodeKind, classify, contains_nested, is_container, members
from .value_tree import ValueTree

logger = logging.getLogger(__name__)

# Object fields used as a group title, in order of preference
TITLE_FIELDS = ("Title", "Tag", "Name")


@dataclass
class MetaNode:
    """One editable unit of the value tree."""
    kind: str
    key: Any
    namespace: str
    identity: str
    path: Tuple[Any, ...] = ()
    index: Optional[int] = None
    depth: int = 0
    parent: Optional["MetaNode"] = field(default=None, repr=False, compare=False)
    title: str = ""
    value: Any = None
    is_null: bool = False
    nested: bool = False
    children: List["MetaNode"] = field(default_factory=list)
    add_handler: Optional[Callable[[], None]] = field(default=None, repr=False, compare=False)
    delete_handler: Optional[Callable[[], None]] = field(default=None, repr=False, compare=False)

    @property
    def is_container(self) -> bool:
        return is_container(self.kind)

    @property
    def is_array_element(self) -> bool:
        return self.index is not None

    def iter_nodes(self) -> Iterator["MetaNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def signature(self) -> Tuple[Any, ...]:
        """Structural fingerprint (identity, namespace, kind, title) of the subtree."""
        return (self.identity, self.namespace, self.kind, self.title,
                tuple(child.signature() for child in self.children))


@dataclass
class MetaTree:
    """Meta tree of one render pass with root-level members pre-bucketed."""
    root: MetaNode
    root_scalars: List[MetaNode] = field(default_factory=list)
    root_booleans: List[MetaNode] = field(default_factory=list)
    root_arrays: List[MetaNode] = field(default_factory=list)
    root_objects: List[MetaNode] = field(default_factory=list)

    def iter_nodes(self) -> Iterator[MetaNode]:
        return self.root.iter_nodes()

    def by_identity(self) -> Dict[str, MetaNode]:
        return {node.identity: node for node in self.iter_nodes()}

    def find(self, identity: str) -> Optional[MetaNode]:
        return self.by_identity().get(identity)

    def signature(self) -> Tuple[Any, ...]:
        return self.root.signature()


class TreeWalker:
    """Builds a MetaTree from a live value tree."""

    def __init__(self, options: EditorOptions, handlers: Optional[HandlerFactory] = None):
        self.options = options
        self.handlers = handlers

    def build(self, value: Any) -> MetaTree:
        """
        Walk value and return its meta tree.

        An object root has each top-level member routed into the scalar,
        boolean, array or object bucket. An array root becomes the single
        root group; a scalar root becomes a single root scalar.
        """
        if self.handlers is None:
            self.handlers = HandlerFactory(ValueTree(value), self.options)

        kind = classify(value)
        root = MetaNode(kind=kind, key=None, namespace=ROOT_NAMESPACE, identity=ROOT_NAMESPACE)
        tree = MetaTree(root=root)

        if kind == NodeKind.OBJECT:
            self._apply_member_defaults(root, value)
            for key, member in list(value.items()):
                node = self.walk(member, key, root)
                if node.kind == NodeKind.ARRAY:
                    tree.root_arrays.append(node)
                elif node.kind == NodeKind.OBJECT:
                    tree.root_objects.append(node)
                elif node.kind == NodeKind.BOOLEAN:
                    tree.root_booleans.append(node)
                else:
                    tree.root_scalars.append(node)
            root.children = tree.root_scalars + tree.root_booleans + tree.root_arrays + tree.root_objects
            root.nested = contains_nested(value)
        elif kind == NodeKind.ARRAY:
            self._walk_container(root, value)
            tree.root_arrays.append(root)
        else:
            root.value = value
            root.is_null = value is None
            root.title = self._resolve_title(root, value)
            if kind == NodeKind.BOOLEAN:
                tree.root_booleans.append(root)
            else:
                tree.root_scalars.append(root)

        logger.debug(f"Built meta tree: {sum(1 for _ in tree.iter_nodes())} nodes, "
                     f"{len(tree.root_scalars)} scalars, {len(tree.root_booleans)} booleans, "
                     f"{len(tree.root_arrays)} arrays, {len(tree.root_objects)} objects at root")
        return tree

    def walk(self, value: Any, key: Any, parent: MetaNode) -> MetaNode:
        """
        Build the meta node for one member of parent and append it to
        parent.children.

        Args:
            value: The member value (defaults already substituted)
            key: Property name or array index within the parent
            parent: Meta node of the containing object or array

        Returns:
            The new meta node
        """
        parent_is_array = parent.kind == NodeKind.ARRAY
        kind = classify(value)
        node = MetaNode(
            kind=kind,
            key=key,
            namespace=child_namespace(parent.namespace, key, parent_is_array),
            identity=child_identity(parent.identity, key),
            path=parent.path + (key,),
            index=key if parent_is_array else None,
            depth=parent.depth + 1,
            parent=parent,
        )
        parent.children.append(node)

        if is_container(kind):
            self._walk_container(node, value)
        else:
            node.value = value
            node.is_null = value is None
            node.title = self._resolve_title(node, value)
            node.delete_handler = self.handlers.deleter(node)

        return node

    def _walk_container(self, node: MetaNode, value: Any) -> None:
        self._apply_member_defaults(node, value)
        node.nested = contains_nested(value)

        if node.nested and node.kind == NodeKind.OBJECT:
            scalars, booleans, containers = [], [], []
            for key, member in value.items():
                member_kind = classify(member)
                if is_container(member_kind):
                    containers.append(key)
                elif member_kind == NodeKind.BOOLEAN:
                    booleans.append(key)
                else:
                    scalars.append(key)
            ordered = [(key, value[key]) for key in scalars + booleans + containers]
        else:
            ordered = members(value)

        for key, member in ordered:
            self.walk(member, key, node)

        node.title = self._resolve_title(node, value)
        node.add_handler = self.handlers.adder(node)
        node.delete_handler = self.handlers.deleter(node)

    def _apply_member_defaults(self, node: MetaNode, value: Any) -> None:
        """Write configured defaults into null members before they are classified."""
        parent_is_array = node.kind == NodeKind.ARRAY
        for key, member in members(value):
            if member is not None:
                continue
            namespace = child_namespace(node.namespace, key, parent_is_array)
            index = key if parent_is_array else None
            if not self.options.has_default(namespace, index):
                continue
            default = self.options.default_for(namespace, index)
            self.handlers.tree.set(node.path + (key,), default)
            logger.info(f"Applied default for {namespace}: {default!r}")

    def _resolve_title(self, node: MetaNode, value: Any) -> str:
        override = self.options.title_for(node.namespace, node.index)
        if override is not None:
            return str(override)
        if node.kind != NodeKind.OBJECT:
            return "" if node.key is None else str(node.key)
        for field_name in TITLE_FIELDS:
            candidate = value.get(field_name)
            if candidate is not None and candidate != "":
                return str(candidate)
        return ""
