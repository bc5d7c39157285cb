"""
Compile pipeline: DSL text and configuration in, plugin source out.

Stages run strictly in order and each produces a new artifact:

    text -> parse tree -> node records -> resolved records -> source text
"""

import logging
from pathlib import Path

from .._version import get_version
from .config import PluginConfig
from .emitter import build_plugin_source
from .errors import InvariantError
from .flatten import NodeRecord, detach_implicit_root, flatten_parse_node
from .formatter import format_source
from .naming import ListNaming, NamingScheme, apply_naming_scheme
from .nodes import EnumNode, ListNode, ParseNode, SingletonNode, tree_size
from .parser import parse_config

logger = logging.getLogger(__name__)

# Placeholder name of the synthetic root used when no root state is configured
IMPLICIT_ROOT_NAME = ""


def build_root(items: list[ParseNode], root_state_name: str | None) -> ParseNode:
    """
    Wrap top-level items in a single root node.

    With a root state name, no items yield a singleton placeholder and any
    items become variants of a root enum. Without one, items are grouped
    under an implicit list root that is detached after flattening.
    """
    if root_state_name is None:
        return ListNode(name=IMPLICIT_ROOT_NAME, children=items)
    if not items:
        return SingletonNode(name=root_state_name)
    return EnumNode(name=root_state_name, children=items)


def process_parse_nodes(
    items: list[ParseNode],
    naming_scheme: NamingScheme,
    root_state_name: str | None,
    list_naming: ListNaming = ListNaming.INCLUSIVE,
) -> list[NodeRecord]:
    """
    Flatten top-level items and resolve every name.

    Args:
        items: Top-level parse nodes
        naming_scheme: Naming policy
        root_state_name: Synthetic root name, or None for independent roots
        list_naming: How List ancestors contribute to names

    Returns:
        Resolved node records

    Raises:
        DuplicateNameError: If two states resolve to the same name
        InvariantError: If flattening produced more records than tree nodes
    """
    root = build_root(items, root_state_name)
    parse_tree_size = tree_size(root)

    records = flatten_parse_node(root)
    if len(records) > parse_tree_size:
        raise InvariantError(
            f"State table ({len(records)}) exceeds parse tree ({parse_tree_size})"
        )
    if root_state_name is None:
        records = detach_implicit_root(records)

    apply_naming_scheme(records, naming_scheme, list_naming)
    return records


def generate_debug_info(src_path: str, source: str) -> str:
    """Render the banner naming the generator and echoing the DSL source."""
    lines = [f"// generated by stategen v{get_version()}", f"// src: {src_path}"]
    lines.extend(f"// {line}".rstrip() for line in source.splitlines())
    return "\n".join(lines) + "\n"


def compile_states(
    source: str,
    config: PluginConfig | None = None,
    src_path: str | None = None,
    file: Path | None = None,
) -> str:
    """
    Compile DSL text into plugin source.

    Args:
        source: DSL text
        config: Plugin configuration (defaults if omitted)
        src_path: If given, prepend a banner naming this source path
        file: Source file, used for error locations

    Returns:
        Generated source text

    Raises:
        ParseError: If the DSL text is malformed
        DuplicateNameError: If two states resolve to the same name
        InvariantError: On an internal defect
    """
    config = config or PluginConfig()

    items = parse_config(source, file)
    logger.debug("Parsed %d top-level items", len(items))

    records = process_parse_nodes(
        items,
        config.naming_scheme,
        config.root_state_name,
        config.list_naming,
    )
    output = build_plugin_source(records, config)

    if config.format_output:
        output = format_source(output, config.formatter_command, config.formatter_timeout)

    if src_path is not None:
        output = f"{generate_debug_info(src_path, source)}\n{output}"
    return output
