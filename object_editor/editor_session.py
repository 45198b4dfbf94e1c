"""
Session state for editor pages.

Streamlit re-executes the page script on every interaction, so the value tree
being edited has to outlive a single run. EditorSession keeps it, the
snapshot taken when editing started, and the page's render counter in
st.session_state. It is the reactive host the editor notifies after each
mutation.
"""

import copy
import streamlit as st
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Union
import logging

from .change_tracker import calculate_changes
from .events import MutationChannel, MutationEvent

logger = logging.getLogger(__name__)


class EditorSession:
    """Per-page editor state backed by a session-state mapping."""

    def __init__(self, page_id: str, state: Optional[MutableMapping[str, Any]] = None):
        self.page_id = page_id
        self.state = state if state is not None else st.session_state

    @property
    def object_key(self) -> str:
        return f"{self.page_id}_object"

    @property
    def snapshot_key(self) -> str:
        return f"{self.page_id}_snapshot"

    @staticmethod
    def render_key(page_id: str) -> str:
        return f"render_{page_id}"

    @property
    def widget_prefix(self) -> str:
        return f"{self.page_id}:"

    def initialize(self, source: Union[Any, Callable[[], Any]]) -> None:
        """
        Load the value tree unless this session already holds one.

        Args:
            source: The value tree, or a zero-argument callable producing it
        """
        if self.object_key in self.state:
            return
        self.load(source() if callable(source) else source)

    def load(self, obj: Any) -> None:
        """Replace the value tree and take a fresh snapshot of it."""
        self.clear_widget_state()
        self.state[self.object_key] = obj
        self.state[self.snapshot_key] = copy.deepcopy(obj)
        self.state.setdefault(self.render_key(self.page_id), 0)
        logger.info(f"Editor session '{self.page_id}' loaded a {type(obj).__name__}")

    def get_object(self) -> Any:
        return self.state.get(self.object_key)

    def get_snapshot(self) -> Any:
        return self.state.get(self.snapshot_key)

    def mark_saved(self) -> None:
        """Treat the current value tree as the new baseline for change tracking."""
        self.state[self.snapshot_key] = copy.deepcopy(self.get_object())
        logger.info(f"Editor session '{self.page_id}' marked as saved")

    def render_count(self, page_id: Optional[str] = None) -> int:
        return self.state.get(self.render_key(page_id or self.page_id), 0)

    def request_rerender(self, page_id: Optional[str] = None) -> int:
        """
        Ask for the page to be rendered again.

        Streamlit reruns the script after every widget callback, so bumping
        the counter is all that is needed for the next run to re-derive the
        view from the mutated tree.

        Returns:
            The new render counter
        """
        key = self.render_key(page_id or self.page_id)
        self.state[key] = self.state.get(key, 0) + 1
        logger.debug(f"Rerender requested: {key}={self.state[key]}")
        return self.state[key]

    def attach(self, channel: MutationChannel) -> Callable[[], None]:
        """Subscribe to an editor's mutation channel; returns the unsubscribe function."""
        def on_mutation(event: MutationEvent) -> None:
            logger.debug(f"Session '{self.page_id}' saw {event.mutation} at {event.namespace}")
            self.request_rerender(self.page_id)

        return channel.subscribe(on_mutation)

    def changes(self) -> List[Dict[str, Any]]:
        """Differences between the snapshot and the live value tree."""
        return calculate_changes(self.get_snapshot(), self.get_object())

    def has_unsaved_changes(self) -> bool:
        return bool(self.changes())

    def clear_widget_state(self) -> None:
        """Forget widget values of this page so they are re-synced from the tree."""
        for key in [k for k in list(self.state.keys()) if str(k).startswith(self.widget_prefix)]:
            del self.state[key]

    def clear(self) -> None:
        """Remove everything this session stored."""
        self.clear_widget_state()
        for key in (self.object_key, self.snapshot_key, self.render_key(self.page_id)):
            if key in self.state:
                del self.state[key]
        logger.info(f"Editor session '{self.page_id}' cleared")
