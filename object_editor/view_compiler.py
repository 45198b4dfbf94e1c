"""
Group/container compiler: meta nodes to view groups.
"""

from typing import Optional
import logging

from .controls import ControlFactory
from .editor_options import EditorOptions
from .meta_model import MetaNode
from .type_classifier import NodeKind
from .view_nodes import ButtonAction, ButtonView, GroupView, PlaceholderView

logger = logging.getLogger(__name__)

ADD_TITLE = "Add"
DELETE_TITLE = "Delete"


class ViewCompiler:
    """Compiles container meta nodes, recursively, into GroupView trees."""

    def __init__(self, options: EditorOptions, controls: ControlFactory):
        self.options = options
        self.controls = controls

    def compile_group(self, node: MetaNode) -> Optional[GroupView]:
        """
        Compile a container node and all of its descendants.

        Children are compiled first; a group left without children gets the
        fixed placeholder. The delete button is present when the node carries
        a delete handler, the add button only on array containers with an
        add handler.

        Returns:
            GroupView, or None when the group's namespace is hidden
        """
        if self.options.is_hidden(node.namespace, node.index):
            return None

        children = []
        for child in node.children:
            if child.is_container:
                view = self.compile_group(child)
            else:
                view = self.controls.make_control(child)
            if view is not None:
                children.append(view)

        if not children:
            children.append(PlaceholderView(identity=f"{node.identity}__empty"))

        disabled = self.options.is_disabled(node.namespace, node.index)

        delete_button = None
        if node.delete_handler is not None:
            delete_button = ButtonView(
                action=ButtonAction.DELETE,
                title=DELETE_TITLE,
                identity=f"{node.identity}__delete",
                on_click=node.delete_handler,
                disabled=disabled,
            )

        add_button = None
        if node.add_handler is not None and not node.is_array_element:
            add_button = ButtonView(
                action=ButtonAction.ADD,
                title=ADD_TITLE,
                identity=f"{node.identity}__add",
                on_click=node.add_handler,
                disabled=disabled,
            )

        group_class = "obj-grp" if node.kind == NodeKind.OBJECT else "arr-grp"
        return GroupView(
            identity=node.identity,
            namespace=node.namespace,
            kind=node.kind,
            title=node.title,
            collapsible=node.nested,
            depth=node.depth,
            css_class=f"{group_class} depth-{node.depth}",
            delete_button=delete_button,
            add_button=add_button,
            children=children,
        )
