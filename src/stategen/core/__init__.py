"""Core stategen functionality: lexer, parser, flattener, naming, emitter."""

from .config import REQUIRED_DERIVES, PluginConfig, PluginStyle, load_config
from .errors import (
    ConfigError,
    DuplicateNameError,
    ErrorContext,
    InvariantError,
    ParseError,
    StategenError,
)
from .flatten import NodeRecord, NodeType, flatten_parse_node
from .naming import ListNaming, NamingScheme, apply_naming_scheme
from .nodes import CommentNode, EnumNode, ListNode, ParseNode, SingletonNode, tree_size
from .parser import config_is_valid, parse_config, parse_node
from .pipeline import compile_states, process_parse_nodes

__all__ = [
    "REQUIRED_DERIVES",
    "PluginConfig",
    "PluginStyle",
    "load_config",
    "StategenError",
    "ParseError",
    "DuplicateNameError",
    "InvariantError",
    "ConfigError",
    "ErrorContext",
    "NodeRecord",
    "NodeType",
    "flatten_parse_node",
    "NamingScheme",
    "ListNaming",
    "apply_naming_scheme",
    "ParseNode",
    "SingletonNode",
    "EnumNode",
    "ListNode",
    "CommentNode",
    "tree_size",
    "parse_config",
    "parse_node",
    "config_is_valid",
    "compile_states",
    "process_parse_nodes",
]
