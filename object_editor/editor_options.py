"""
Typed editor options.

The recognized option names are kept verbatim as aliases (``newButtons``,
``readOnly``...) so option dictionaries written for the control panel pages
validate unchanged, while Python callers can use the snake_case field names.
"""

import copy
from typing import Dict, Any, Callable, Optional, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .namespace import lookup_keys, qualified

logger = logging.getLogger(__name__)

DEFAULT_BASE_CLASS = "object-editor"

DEFAULT_BUTTON_TITLES = {
    'back_button': "Back",
    'save_button': "Save",
    'delete_button': "Delete",
}


class ButtonSpec(BaseModel):
    """A shell-level action: a title and the callable invoked with the root object."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str = ""
    func: Callable[..., Any]


class EditorOptions(BaseModel):
    """Per-editor configuration keyed by namespace."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore', arbitrary_types_allowed=True)

    titles: Dict[str, str] = Field(default_factory=dict)
    defaults: Dict[str, Any] = Field(default_factory=dict)
    hidden: Dict[str, bool] = Field(default_factory=dict)
    disabled: Dict[str, bool] = Field(default_factory=dict)
    new_buttons: Dict[str, Callable[..., Any]] = Field(default_factory=dict, alias="newButtons")
    del_buttons: Dict[str, Callable[..., Any]] = Field(default_factory=dict, alias="delButtons")
    back_button: Optional[ButtonSpec] = Field(default=None, alias="backButton")
    save_button: Optional[ButtonSpec] = Field(default=None, alias="saveButton")
    delete_button: Optional[ButtonSpec] = Field(default=None, alias="deleteButton")
    read_only: bool = Field(default=False, alias="readOnly")
    base_class: str = Field(default=DEFAULT_BASE_CLASS, alias="baseClass")

    @field_validator('hidden', 'disabled', mode='before')
    @classmethod
    def _flags_from_collection(cls, value: Any) -> Any:
        # A bare list/set of namespaces means "all of these are on"
        if isinstance(value, (list, set, tuple, frozenset)):
            return {namespace: True for namespace in value}
        return value

    @field_validator('back_button', 'save_button', 'delete_button', mode='before')
    @classmethod
    def _button_from_callable(cls, value: Any, info) -> Any:
        if value is None or isinstance(value, ButtonSpec):
            return value
        if callable(value):
            return {'title': DEFAULT_BUTTON_TITLES[info.field_name], 'func': value}
        if isinstance(value, dict) and not value.get('title'):
            return {**value, 'title': DEFAULT_BUTTON_TITLES[info.field_name]}
        return value

    @classmethod
    def coerce(cls, opts: Union["EditorOptions", Dict[str, Any], None]) -> "EditorOptions":
        """Accept an EditorOptions, an option dictionary, or None."""
        if opts is None:
            return cls()
        if isinstance(opts, cls):
            return opts
        return cls.model_validate(opts)

    @staticmethod
    def _lookup(mapping: Dict[str, Any], namespace: str, index: Optional[int] = None) -> Any:
        for key in lookup_keys(namespace, index):
            if key in mapping:
                return mapping[key]
        return None

    def title_for(self, namespace: str, index: Optional[int] = None) -> Optional[str]:
        return self._lookup(self.titles, namespace, index)

    @staticmethod
    def _default_key(namespace: str, index: Optional[int] = None) -> str:
        # Elements share the array's namespace; its bare default belongs to the array
        return namespace if index is None else qualified(namespace, index)

    def has_default(self, namespace: str, index: Optional[int] = None) -> bool:
        return self._default_key(namespace, index) in self.defaults

    def default_for(self, namespace: str, index: Optional[int] = None) -> Any:
        """Return a fresh copy of the configured default so nodes never share it."""
        return copy.deepcopy(self.defaults.get(self._default_key(namespace, index)))

    def is_hidden(self, namespace: str, index: Optional[int] = None) -> bool:
        return bool(self._lookup(self.hidden, namespace, index))

    def is_disabled(self, namespace: str, index: Optional[int] = None) -> bool:
        if self.read_only:
            return True
        return bool(self._lookup(self.disabled, namespace, index))

    def add_factory_for(self, namespace: str, index: Optional[int] = None) -> Optional[Callable[..., Any]]:
        return self._lookup(self.new_buttons, namespace, index)

    def delete_handler_for(self, namespace: str, index: Optional[int] = None) -> Optional[Callable[..., Any]]:
        return self._lookup(self.del_buttons, namespace, index)
