"""
View tree produced by the editor.

These are plain descriptions of what to draw; the host renderer maps them to
widgets. Callbacks on controls and buttons mutate the caller's value tree.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Union
import logging

logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER = "No items available"


class ControlType:
    """Input control constants."""
    TOGGLE = "toggle"
    TEXT = "text"
    NUMBER = "number"


class ButtonAction:
    """Button action constants."""
    ADD = "add"
    DELETE = "delete"
    BACK = "back"
    SAVE = "save"


@dataclass
class ButtonView:
    action: str
    title: str
    identity: str
    on_click: Callable[[], Any] = field(repr=False, compare=False)
    disabled: bool = False

    def click(self) -> bool:
        """Invoke the action unless the button is disabled. Returns True if it ran."""
        if self.disabled:
            logger.warning(f"Rejected {self.action} on disabled button {self.identity}")
            return False
        self.on_click()
        return True


@dataclass
class ControlView:
    control_type: str
    identity: str
    namespace: str
    value: Any
    label: Optional[str] = None
    disabled: bool = False
    on_change: Optional[Callable[[Any], None]] = field(default=None, repr=False, compare=False)
    remove_button: Optional[ButtonView] = None

    def change(self, raw_value: Any) -> bool:
        """Apply a user edit unless the control rejects edits. Returns True if written."""
        if self.disabled or self.on_change is None:
            logger.warning(f"Rejected edit on disabled control {self.identity}")
            return False
        self.on_change(raw_value)
        return True


@dataclass
class PlaceholderView:
    identity: str
    text: str = EMPTY_PLACEHOLDER


ViewNode = Union["GroupView", ControlView, PlaceholderView]


@dataclass
class GroupView:
    identity: str
    namespace: str
    kind: str
    title: str = ""
    collapsible: bool = False
    depth: int = 0
    css_class: str = ""
    delete_button: Optional[ButtonView] = None
    add_button: Optional[ButtonView] = None
    children: List[ViewNode] = field(default_factory=list)

    @property
    def has_header(self) -> bool:
        return bool(self.title) or self.add_button is not None

    @property
    def is_empty(self) -> bool:
        return len(self.children) == 1 and isinstance(self.children[0], PlaceholderView)

    def iter_views(self) -> Iterator[ViewNode]:
        """Yield this group and all nested views in render order."""
        yield self
        for child in self.children:
            if isinstance(child, GroupView):
                yield from child.iter_views()
            else:
                yield child
