"""
Runtime Configuration Module

Provides configuration loading and tree construction from configuration.
"""

from .runtime import (
    ApiConfig,
    RuntimeConfig,
    TreeConfig,
    build_tree,
    get_default_config,
    get_default_config_template,
    load_config,
    set_default_config,
)

__all__ = [
    "ApiConfig",
    "RuntimeConfig",
    "TreeConfig",
    "build_tree",
    "get_default_config",
    "get_default_config_template",
    "load_config",
    "set_default_config",
]
