"""
Schema-less object editor for the tunnel control panel.

Walks an arbitrary JSON-like value, derives a stable namespace for every node,
and compiles an editable view whose callbacks write straight back into the
value. The core never imports Streamlit; editor_session and
streamlit_renderer host it in a Streamlit page.
"""

from .editor import EditorView, ObjectEditor, render_editor
from .editor_options import ButtonSpec, EditorOptions
from .events import MutationChannel, MutationEvent, MutationType
from .meta_model import MetaNode, MetaTree, TreeWalker
from .type_classifier import NodeKind, classify
from .view_nodes import (
    EMPTY_PLACEHOLDER, ButtonView, ControlType, ControlView, GroupView, PlaceholderView
)

__all__ = [
    'ButtonSpec',
    'ButtonView',
    'ControlType',
    'ControlView',
    'EMPTY_PLACEHOLDER',
    'EditorOptions',
    'EditorView',
    'GroupView',
    'MetaNode',
    'MetaTree',
    'MutationChannel',
    'MutationEvent',
    'MutationType',
    'NodeKind',
    'ObjectEditor',
    'PlaceholderView',
    'TreeWalker',
    'classify',
    'render_editor',
]
