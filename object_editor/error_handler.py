"""
Error handling for the Streamlit host.
Reports failures of caller-supplied actions and stale mutation callbacks to
the user instead of letting them abort the page.
"""

import streamlit as st
import logging
import traceback
from functools import wraps
from typing import Any, Callable, Dict, Optional

from .exceptions import ConfigurationLoadError, ObjectEditorError, ValuePathError

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    CONFIGURATION = "configuration"
    MUTATION = "mutation"
    ACTION = "action"
    SYSTEM = "system"


ERROR_MESSAGES: Dict[str, Dict[Any, str]] = {
    ErrorType.CONFIGURATION: {
        ConfigurationLoadError: "⚙️ Editor configuration could not be loaded. Default options are in use.",
        "default": "⚙️ Editor configuration error."
    },
    ErrorType.MUTATION: {
        ValuePathError: "🔄 This field changed before your edit was applied. The editor has been refreshed.",
        "default": "🔄 The edit could not be applied."
    },
    ErrorType.ACTION: {
        ConnectionError: "🌐 Could not reach the control plane. Please try again.",
        TimeoutError: "⏱️ The control plane did not answer in time. Please try again.",
        "default": "⚠️ The action failed. Please try again."
    },
    ErrorType.SYSTEM: {
        "default": "💻 Unexpected error. Please try again or reload the page."
    },
}


class ErrorHandler:
    """Error reporting for the editor host."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False
    ) -> None:
        """
        Log an error and show a user-friendly message.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            show_details: Whether to show technical details
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler.get_user_friendly_message(error, error_type)

        st.error(user_message)

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {str(error)}")
                if isinstance(error, ObjectEditorError):
                    st.json(error.get_full_details())
                st.code(''.join(traceback.format_exception(type(error), error, error.__traceback__)))

    @staticmethod
    def get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Pick the message for the most specific matching exception class."""
        messages = ERROR_MESSAGES.get(error_type, ERROR_MESSAGES[ErrorType.SYSTEM])

        for exception_type, message in messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def guard(func: Callable[..., Any], context: str, error_type: str = ErrorType.ACTION,
              show_details: bool = False) -> Callable[..., Any]:
        """Wrap a callback so that an exception is reported instead of raised."""
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                ErrorHandler.handle_error(e, context, error_type, show_details=show_details)
                return None

        return wrapper
