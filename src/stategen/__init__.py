"""
stategen - compile a compact state-hierarchy DSL into state plugin source.

A DSL such as ``Loading, Ready { Menu Game { Playing Paused } }`` is parsed,
flattened, given collision-checked type names and rendered as state type
definitions plus a plugin that registers them.
"""

from __future__ import annotations

from ._version import get_version
from .build import generate_plugin, update_template
from .core import (
    ConfigError,
    DuplicateNameError,
    InvariantError,
    ListNaming,
    NamingScheme,
    ParseError,
    PluginConfig,
    StategenError,
    compile_states,
    config_is_valid,
    load_config,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "PluginConfig",
    "NamingScheme",
    "ListNaming",
    "load_config",
    "compile_states",
    "config_is_valid",
    "generate_plugin",
    "update_template",
    "StategenError",
    "ParseError",
    "DuplicateNameError",
    "InvariantError",
    "ConfigError",
]
