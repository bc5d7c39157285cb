"""
Template header parser.

A template file starts with a block of ``//`` comment lines. Lines of the
form ``// stategen:<key> <value>`` are directives that adjust the plugin
configuration; every other comment line is DSL text with the comment
prefix stripped. Everything after the block is generated output and is
ignored.

Example::

    // stategen:root_state    GameState
    // stategen:naming_scheme Short
    // stategen:
    // Loading { Configs Assets }
    // Ready { Playing Paused }

Unknown keys and invalid values are reported as warnings, never errors, so
a stale header cannot break a build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import PluginConfig
from .errors import ConfigError

logger = logging.getLogger(__name__)

DIRECTIVE_PREFIX = "stategen:"

# Directive key -> PluginConfig field
DIRECTIVE_FIELDS = {
    "plugin_name": "plugin_name",
    "root_state": "root_state_name",
    "states_module": "states_module_name",
    "naming_scheme": "naming_scheme",
    "list_naming": "list_naming",
    "derives": "additional_derives",
}


@dataclass
class TemplateHeader:
    """
    Parsed leading comment block of a template.

    Attributes:
        comments_block: The comment lines, verbatim
        template: DSL lines with the comment prefix removed
        directives: Directive key/value pairs in file order
        warnings: Problems found while applying directives
    """

    comments_block: list[str] = field(default_factory=list)
    template: list[str] = field(default_factory=list)
    directives: list[tuple[str, str]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def source(self) -> str:
        """DSL text carried by the header."""
        return "\n".join(self.template)


def _strip_comment(line: str) -> str:
    body = line.lstrip()[2:]
    return body[1:] if body.startswith(" ") else body


def _apply_directive(
    config: PluginConfig, key: str, value: str, header: TemplateHeader
) -> PluginConfig:
    field_name = DIRECTIVE_FIELDS.get(key)
    if field_name is None:
        header.warnings.append(f"Unknown directive {key!r}")
        return config

    new_value: object = value
    if field_name == "additional_derives":
        new_value = [*config.additional_derives, *(d for d in value.split(",") if d.strip())]

    try:
        return config.with_overrides(**{field_name: new_value})
    except ConfigError as e:
        header.warnings.append(f"Ignoring directive {key!r}: {e.message}")
        return config


def parse_template_header(
    text: str, config: PluginConfig
) -> tuple[TemplateHeader, PluginConfig]:
    """
    Parse the header of a template and apply its directives.

    Args:
        text: Full template text
        config: Base configuration that directives override

    Returns:
        Parsed header and the resulting configuration
    """
    header = TemplateHeader()

    for line in text.splitlines():
        if not line.lstrip().startswith("//"):
            break
        header.comments_block.append(line)

        body = _strip_comment(line)
        if not body.lstrip().startswith(DIRECTIVE_PREFIX):
            header.template.append(body)
            continue

        key, _, value = body.lstrip()[len(DIRECTIVE_PREFIX) :].strip().partition(" ")
        if not key:
            continue
        value = value.strip()
        header.directives.append((key, value))
        config = _apply_directive(config, key, value, header)

    for warning in header.warnings:
        logger.warning("Template header: %s", warning)

    return header, config
