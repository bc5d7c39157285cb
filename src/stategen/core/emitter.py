"""
Source emitter for resolved state tables.

Renders one type definition per record inside a states module, followed
by the plugin whose build routine registers every state:

- roots are initialized with ``init_state``
- every other record is registered with ``add_sub_state``

Registration follows table order, so each state is registered after its
parent, which the host framework requires.
"""

from __future__ import annotations

from textwrap import indent

from .config import PluginConfig, PluginStyle
from .errors import InvariantError
from .flatten import NodeRecord, NodeType

INDENT = "    "


def _resolved(record: NodeRecord) -> str:
    if record.resolved_name is None:
        raise InvariantError(f"Record {record.name!r} has not been resolved")
    return record.resolved_name


def render_attributes(record: NodeRecord, records: list[NodeRecord], derives: list[str]) -> str:
    """Render the derive line, plus the source back-reference for sub-states."""
    derive_list = ", ".join(derives)
    if record.parent is None:
        return f"#[derive(bevy::prelude::States, {derive_list})]"

    source = _resolved(records[record.parent])
    return (
        f"#[derive(bevy::prelude::SubStates, {derive_list})]\n"
        f"#[source({source} = {source}::{record.name})]"
    )


def render_body(record: NodeRecord) -> str:
    """Render a zero-field struct, or an enum whose first variant is the default."""
    typename = _resolved(record)
    if record.node_type != NodeType.ENUM or not record.variants:
        return f"pub struct {typename};"

    lines = [f"pub enum {typename} {{", f"{INDENT}#[default]"]
    lines.extend(f"{INDENT}{variant}," for variant in record.variants)
    lines.append("}")
    return "\n".join(lines)


def render_type_definition(
    record: NodeRecord, records: list[NodeRecord], derives: list[str]
) -> str:
    return f"{render_attributes(record, records, derives)}\n{render_body(record)}"


def render_registration(records: list[NodeRecord], states_module_name: str) -> str:
    """Render the chained registration statement for every record, in table order."""
    calls = []
    for record in records:
        method = "init_state" if record.parent is None else "add_sub_state"
        calls.append(f".{method}::<{states_module_name}::{_resolved(record)}>()")

    if not calls:
        return "let _ = app;"
    return "app" + calls[0] + "".join(f"\n{INDENT}{call}" for call in calls[1:]) + ";"


def render_plugin(config: PluginConfig, registration: str) -> str:
    """Render the plugin as a struct implementing Plugin, or as a function."""
    name = config.plugin_name
    if config.plugin_style == PluginStyle.STRUCT:
        return (
            f"pub struct {name};\n"
            f"impl bevy::app::Plugin for {name} {{\n"
            f"{INDENT}fn build(&self, app: &mut bevy::app::App) {{\n"
            f"{indent(registration, INDENT * 2)}\n"
            f"{INDENT}}}\n"
            "}"
        )
    return f"pub fn {name}(app: &mut bevy::app::App) {{\n{indent(registration, INDENT)}\n}}"


def build_plugin_source(records: list[NodeRecord], config: PluginConfig) -> str:
    """
    Render the full plugin source for a resolved table.

    Args:
        records: Flattened table with every name resolved
        config: Plugin configuration

    Returns:
        Generated source text, newline terminated

    Raises:
        InvariantError: If a record has no resolved name
    """
    derives = config.derives
    definitions = "\n\n".join(
        render_type_definition(record, records, derives) for record in records
    )
    module_body = "use bevy::prelude::StateSet;"
    if definitions:
        module_body += f"\n\n{definitions}"
    registration = render_registration(records, config.states_module_name)

    return (
        "use bevy::prelude::AppExtStates;\n"
        "#[allow(missing_docs)]\n"
        f"pub mod {config.states_module_name} {{\n"
        f"{indent(module_body, INDENT)}\n"
        "}\n"
        "\n"
        f"{render_plugin(config, registration)}\n"
    )
