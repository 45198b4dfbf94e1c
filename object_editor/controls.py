"""
Input control factory.

Turns leaf meta nodes into ControlView descriptions whose on_change writes
back into the value tree. The kind frozen at walk time decides the coercion:
a string field stays a string even if the new text looks like a number.
"""

import math
from typing import Any, Optional
import logging

from .editor_options import EditorOptions
from .handlers import HandlerFactory
from .meta_model import MetaNode
from .type_classifier import NodeKind
from .view_nodes import ButtonAction, ButtonView, ControlType, ControlView

logger = logging.getLogger(__name__)

REMOVE_TITLE = "Remove"


def to_number(raw_value: Any) -> Any:
    """
    Convert user input to a number the way a browser number field would.

    Blank input is 0; text that is not numeric becomes NaN. Integral text
    stays an int so round-tripped JSON does not gain a trailing ``.0``.
    """
    if isinstance(raw_value, bool):
        return int(raw_value)
    if isinstance(raw_value, (int, float)):
        return raw_value
    text = str(raw_value).strip()
    if text == "":
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return math.nan


def to_string(raw_value: Any) -> str:
    return str(raw_value)


class ControlFactory:
    """Builds input controls for leaf meta nodes."""

    def __init__(self, options: EditorOptions, handlers: HandlerFactory):
        self.options = options
        self.handlers = handlers

    def make_control(self, node: MetaNode) -> Optional[ControlView]:
        """
        Build the control for a leaf node.

        Args:
            node: A leaf meta node

        Returns:
            ControlView, or None for hidden fields and null values
        """
        if self.options.is_hidden(node.namespace, node.index):
            return None
        if node.is_null:
            logger.debug(f"No control for null value at {node.identity}")
            return None

        # The root itself has no slot to write into
        disabled = self.options.is_disabled(node.namespace, node.index) or not node.path
        set_value = self.handlers.setter(node)

        if node.kind == NodeKind.BOOLEAN:
            control_type = ControlType.TOGGLE
            value = bool(node.value)

            def on_change(raw_value: Any) -> None:
                set_value(bool(raw_value))
        elif node.kind == NodeKind.NUMBER:
            control_type = ControlType.NUMBER
            value = node.value

            def on_change(raw_value: Any) -> None:
                set_value(to_number(raw_value))
        else:
            control_type = ControlType.TEXT
            value = to_string(node.value)

            def on_change(raw_value: Any) -> None:
                set_value(to_string(raw_value))

        label = node.title
        remove_button = None
        if node.is_array_element:
            # Array elements show value + remove instead of value + label
            label = None
            if node.delete_handler is not None:
                remove_button = ButtonView(
                    action=ButtonAction.DELETE,
                    title=REMOVE_TITLE,
                    identity=f"{node.identity}__remove",
                    on_click=node.delete_handler,
                    disabled=disabled,
                )

        return ControlView(
            control_type=control_type,
            identity=node.identity,
            namespace=node.namespace,
            value=value,
            label=label,
            disabled=disabled,
            on_change=on_change,
            remove_button=remove_button,
        )
