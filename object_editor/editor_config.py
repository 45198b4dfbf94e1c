"""
Configuration loading for the control panel and its editors.

Application settings and the static part of each page's editor options
(titles, defaults, hidden and disabled fields, read-only mode) live in
config.yaml. Callable options (buttons, add factories, delete handlers)
cannot be expressed in YAML and are supplied by the page when the options
are built.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Callable
import logging
from copy import deepcopy

from .editor_options import EditorOptions
from .exceptions import ConfigurationLoadError

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

# Keys of a page section that map straight onto EditorOptions
PAGE_OPTION_KEYS = ('titles', 'defaults', 'hidden', 'disabled', 'readOnly', 'baseClass')

_config_cache = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'Tunnel Control Panel',
            'version': '1.0.0',
            'debug': False
        },
        'ui': {
            'page_title': 'Tunnel Control Panel',
            'sidebar_title': 'Navigation'
        },
        'logging': {
            'level': 'INFO'
        },
        'editor': {
            'base_class': 'object-editor',
            'pages': {}
        }
    }


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Read a YAML configuration file without falling back.

    Raises:
        ConfigurationLoadError: If the file cannot be read or parsed, or its
            top level is not a mapping
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except (yaml.YAMLError, IOError, OSError) as e:
        raise ConfigurationLoadError(config_path, e)

    if user_config is None:
        return {}
    if not isinstance(user_config, dict):
        raise ConfigurationLoadError(
            config_path,
            TypeError(f"top level is {type(user_config).__name__}, expected a mapping")
        )
    return user_config


def load_config(config_path: Optional[Path] = None, use_cache: bool = True) -> Dict[str, Any]:
    """
    Load application configuration merged over the defaults.

    A missing, empty or unreadable file yields the default configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)
        use_cache: Return the previously loaded configuration if available

    Returns:
        Complete configuration dictionary
    """
    global _config_cache

    if use_cache and config_path is None and _config_cache is not None:
        return _config_cache

    path = config_path or CONFIG_FILE
    default_config = get_default_config()

    if not path.exists():
        logger.warning(f"Configuration file not found: {path}")
        logger.info("Using default configuration")
        config = default_config
    else:
        try:
            user_config = read_config_file(path)
            if not user_config:
                logger.warning(f"Configuration file is empty: {path}")
            config = deep_merge(default_config, user_config)
            logger.info(f"Successfully loaded configuration from {path}")
        except ConfigurationLoadError as e:
            logger.error(str(e))
            logger.info("Using default configuration")
            config = default_config

    if config_path is None:
        _config_cache = config
    return config


def reload_config() -> Dict[str, Any]:
    """Drop the cached configuration and load it again."""
    global _config_cache
    _config_cache = None
    return load_config()


def get_config_value(section: str, key: str, default: Any = None,
                     config: Optional[Dict[str, Any]] = None) -> Any:
    """
    Get a single configuration value.

    Args:
        section: Top-level section name
        key: Key within the section
        default: Value returned when the section or key is missing
        config: Configuration to read (defaults to the loaded config.yaml)
    """
    config = config if config is not None else load_config()
    section_values = config.get(section)
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def get_page_options(page_id: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Get the static editor options configured for a page.

    Returns:
        Option dictionary using the recognized option names; empty when the
        page has no section
    """
    config = config if config is not None else load_config()
    editor_section = config.get('editor') or {}
    page_section = (editor_section.get('pages') or {}).get(page_id) or {}

    if not isinstance(page_section, dict):
        logger.warning(f"Editor options for page '{page_id}' are not a mapping; ignoring")
        return {}

    options = {key: deepcopy(page_section[key]) for key in PAGE_OPTION_KEYS if key in page_section}
    options.setdefault('baseClass', editor_section.get('base_class', 'object-editor'))

    ignored = set(page_section) - set(PAGE_OPTION_KEYS)
    if ignored:
        logger.warning(f"Ignoring unknown editor options for page '{page_id}': {sorted(ignored)}")

    return options


def build_options(page_id: str, config: Optional[Dict[str, Any]] = None,
                  **callables: Callable[..., Any]) -> EditorOptions:
    """
    Combine a page's configured options with callable options.

    Args:
        page_id: Page section under editor.pages
        config: Configuration dictionary (defaults to config.yaml)
        **callables: newButtons, delButtons, backButton, saveButton,
            deleteButton (or their snake_case names)

    Returns:
        Validated EditorOptions
    """
    options = get_page_options(page_id, config)
    options.update(callables)
    return EditorOptions.model_validate(options)
