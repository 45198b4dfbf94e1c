"""
Streamlit renderer for compiled editor views.

Maps an EditorView onto Streamlit widgets. Widget keys are the derived node
identities prefixed with the page id; before each input is created its
session value is re-synced from the value tree, so a key that now belongs to
a different element (after a delete shifted the array) never shows a stale
value.
"""

import json
import streamlit as st
from typing import Any, Dict, List, MutableMapping, Optional
import logging

from .change_tracker import get_change_summary
from .editor import EditorView
from .error_handler import ErrorHandler, ErrorType
from .view_nodes import (
    ButtonAction, ButtonView, ControlType, ControlView, GroupView, PlaceholderView
)

logger = logging.getLogger(__name__)


def _format_change_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return str(value)


class StreamlitRenderer:
    """Draws EditorView trees for one page."""

    def __init__(self, page_id: str, state: Optional[MutableMapping[str, Any]] = None):
        self.page_id = page_id
        self.state = state if state is not None else st.session_state

    def widget_key(self, identity: str) -> str:
        return f"{self.page_id}:{identity}"

    def render(self, view: EditorView) -> None:
        """Render shell buttons, root scalars, root booleans, then groups."""
        self._render_shell_buttons(view.shell_buttons)
        self._render_grid(view.scalars)
        self._render_grid(view.booleans)
        for group in view.groups:
            self._render_group(group, top_level=True)

    def render_changes(self, changes: List[Dict[str, Any]]) -> None:
        """Show pending changes between the snapshot and the live tree."""
        st.subheader("Pending changes")
        if not changes:
            st.caption("No unsaved changes")
            return

        summary = get_change_summary(changes)
        st.caption(f"{summary['changed']} changed, {summary['added']} added, {summary['removed']} removed")
        st.dataframe(
            [
                {
                    'Field': row['path'],
                    'Change': row['change'],
                    'Old': _format_change_value(row['old']),
                    'New': _format_change_value(row['new']),
                }
                for row in changes
            ],
            use_container_width=True,
            hide_index=True,
        )

    def _render_shell_buttons(self, buttons: List[ButtonView]) -> None:
        if not buttons:
            return
        cols = st.columns(len(buttons))
        for col, button in zip(cols, buttons):
            with col:
                self._render_button(button, ErrorType.ACTION)

    def _render_grid(self, controls: List[ControlView]) -> None:
        if not controls:
            return
        cols = st.columns(2)
        for col_index, control in enumerate(controls):
            with cols[col_index % 2]:
                self._render_control(control)

    def _render_group(self, group: GroupView, top_level: bool = False) -> None:
        # Streamlit does not allow expanders inside expanders
        if group.collapsible and top_level:
            container = st.expander(group.title or group.identity, expanded=True)
        else:
            container = st.container(border=True)

        with container:
            if group.delete_button is not None:
                self._render_button(group.delete_button, ErrorType.MUTATION)

            if group.has_header:
                title_col, add_col = st.columns([5, 1])
                with title_col:
                    if group.title:
                        st.markdown(f"**{group.title}**")
                with add_col:
                    if group.add_button is not None:
                        self._render_button(group.add_button, ErrorType.MUTATION)

            for child in group.children:
                if isinstance(child, GroupView):
                    self._render_group(child)
                elif isinstance(child, PlaceholderView):
                    st.caption(child.text)
                else:
                    self._render_control(child)

    def _render_button(self, button: ButtonView, error_type: str) -> None:
        st.button(
            button.title,
            key=self.widget_key(button.identity),
            disabled=button.disabled,
            type="primary" if button.action == ButtonAction.SAVE else "secondary",
            on_click=ErrorHandler.guard(button.click, f"{button.action} {button.identity}", error_type),
        )

    def _render_control(self, control: ControlView) -> None:
        if control.remove_button is not None:
            input_col, remove_col = st.columns([6, 1])
            with input_col:
                self._render_input(control)
            with remove_col:
                self._render_button(control.remove_button, ErrorType.MUTATION)
        else:
            self._render_input(control)

    def _render_input(self, control: ControlView) -> None:
        key = self.widget_key(control.identity)
        widget_kwargs = {
            'key': key,
            'disabled': control.disabled,
            'on_change': ErrorHandler.guard(self._on_widget_change, f"editing {control.identity}",
                                            ErrorType.MUTATION),
            'args': (control, key),
            'label_visibility': "visible" if control.label else "collapsed",
        }
        label = control.label or control.identity

        # The widget's value is carried by session state, not a value= argument.
        # Numbers use a text input so unparsable text reaches to_number and becomes NaN.
        if control.control_type == ControlType.TOGGLE:
            self.state[key] = bool(control.value)
            st.toggle(label, **widget_kwargs)
        else:
            self.state[key] = "" if control.value is None else str(control.value)
            st.text_input(label, **widget_kwargs)

    def _on_widget_change(self, control: ControlView, key: str) -> None:
        control.change(self.state.get(key))
