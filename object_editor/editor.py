"""
Editor shell: the single entry point that turns ``(object, opts)`` into a view.

The editor is a pure function of the current contents of the object and the
options. Side effects happen only later, when a control or button callback
fires and writes into the object; the caller is notified through the
MutationChannel and is expected to render again.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import logging

from .controls import ControlFactory
from .editor_options import ButtonSpec, EditorOptions
from .events import MutationChannel
from .handlers import HandlerFactory
from .meta_model import MetaTree, TreeWalker
from .value_tree import ValueTree
from .view_compiler import ViewCompiler
from .view_nodes import ButtonAction, ButtonView, ControlView, GroupView

logger = logging.getLogger(__name__)


@dataclass
class EditorView:
    """Compiled editor: shell buttons, root grids, then nested groups."""
    base_class: str
    back_button: Optional[ButtonView] = None
    save_button: Optional[ButtonView] = None
    delete_button: Optional[ButtonView] = None
    scalars: List[ControlView] = field(default_factory=list)
    booleans: List[ControlView] = field(default_factory=list)
    groups: List[GroupView] = field(default_factory=list)
    meta_tree: Optional[MetaTree] = field(default=None, repr=False, compare=False)

    @property
    def shell_buttons(self) -> List[ButtonView]:
        return [button for button in (self.back_button, self.save_button, self.delete_button)
                if button is not None]

    def iter_views(self):
        """Yield every control, group and placeholder in render order."""
        yield from self.scalars
        yield from self.booleans
        for group in self.groups:
            yield from group.iter_views()


class ObjectEditor:
    """Schema-less editor for one JSON-like value tree."""

    def __init__(self, obj: Any, opts: Union[EditorOptions, Dict[str, Any], None] = None,
                 channel: Optional[MutationChannel] = None):
        self.obj = obj
        self.options = EditorOptions.coerce(opts)
        self.channel = channel

    def build_meta_tree(self) -> MetaTree:
        """Walk the object from scratch and return its meta tree."""
        handlers = HandlerFactory(ValueTree(self.obj), self.options, self.channel)
        return TreeWalker(self.options, handlers).build(self.obj)

    def render(self) -> EditorView:
        """
        Build the complete view for the object's current contents.

        Returns:
            EditorView with back/save/delete buttons, root scalar controls,
            root boolean toggles, and compiled array then object groups
        """
        handlers = HandlerFactory(ValueTree(self.obj), self.options, self.channel)
        tree = TreeWalker(self.options, handlers).build(self.obj)
        controls = ControlFactory(self.options, handlers)
        compiler = ViewCompiler(self.options, controls)

        view = EditorView(base_class=self.options.base_class, meta_tree=tree)
        view.back_button = self._shell_button(ButtonAction.BACK, self.options.back_button, pass_object=False)
        # A read-only editor offers no way to persist or delete the object
        if not self.options.read_only:
            view.save_button = self._shell_button(ButtonAction.SAVE, self.options.save_button)
            view.delete_button = self._shell_button(ButtonAction.DELETE, self.options.delete_button)

        view.scalars = [control for control in map(controls.make_control, tree.root_scalars)
                        if control is not None]
        view.booleans = [control for control in map(controls.make_control, tree.root_booleans)
                         if control is not None]
        for node in tree.root_arrays + tree.root_objects:
            group = compiler.compile_group(node)
            if group is not None:
                view.groups.append(group)

        logger.debug(f"Rendered editor: {len(view.scalars)} scalars, {len(view.booleans)} booleans, "
                     f"{len(view.groups)} groups")
        return view

    def _shell_button(self, action: str, spec: Optional[ButtonSpec],
                      pass_object: bool = True) -> Optional[ButtonView]:
        if spec is None:
            return None
        obj = self.obj
        func = spec.func

        def on_click() -> Any:
            logger.info(f"Shell action: {action}")
            if pass_object:
                return func(obj)
            return func()

        return ButtonView(action=action, title=spec.title, identity=f"root__{action}", on_click=on_click)


def render_editor(obj: Any, opts: Union[EditorOptions, Dict[str, Any], None] = None,
                  channel: Optional[MutationChannel] = None) -> EditorView:
    """Render obj with opts; see ObjectEditor.render."""
    return ObjectEditor(obj, opts, channel).render()
