"""
Exception classes for the object editor.

Configuration misses and coercion misses are not errors (they fall back to
defaults or write NaN); these classes cover the few conditions a caller can
act on.
"""

import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, Sequence

logger = logging.getLogger(__name__)


class ObjectEditorError(Exception):
    """
    Base exception for object editor errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class ConfigurationLoadError(ObjectEditorError):
    """
    Exception raised when an editor configuration file cannot be loaded.

    This includes YAML parsing errors, permission issues and files whose top
    level is not a mapping.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load editor configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check that the configuration file exists and is readable",
            "Verify YAML syntax is correct",
            "The editor will use default options as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)


class ValuePathError(ObjectEditorError):
    """
    Exception raised when a path no longer resolves in the value tree.

    Happens when a callback captured during one render fires after the tree
    was reshaped by another mutation.
    """

    def __init__(self, path: Sequence[Any], failed_at: int, reason: str):
        self.path = tuple(path)
        self.failed_at = failed_at

        message = f"Path {list(self.path)} does not resolve at segment {failed_at}: {reason}"
        context = {
            'path': list(self.path),
            'failed_at': failed_at,
            'reason': reason
        }
        recovery_suggestions = [
            "Re-render the editor so callbacks are rebuilt from the current value tree"
        ]

        super().__init__(message, context, recovery_suggestions)
        logger.debug(f"ValuePathError: {message}")
