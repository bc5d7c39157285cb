"""
Plugin configuration models.

Parses the [stategen] section from a TOML file and provides typed
configuration for the compile pipeline.
"""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .lexer import is_identifier
from .naming import ListNaming, NamingScheme

REQUIRED_DERIVES = ("Hash", "Default", "Debug", "Clone", "PartialEq", "Eq")

DEFAULT_FORMATTER_COMMAND = ["rustfmt", "--edition", "2021"]


class PluginStyle(str, Enum):
    """How the generated plugin is exposed."""

    # ``pub struct Name;`` implementing the plugin trait
    STRUCT = "struct"
    # ``pub fn name(app: &mut App)``
    FUNCTION = "function"


class PluginConfig(BaseModel):
    """
    Configuration for the generated plugin.

    Attributes:
        plugin_name: Plugin identifier; an uppercase first letter selects
            struct style, anything else function style
        root_state_name: Name of the synthetic root state, or None to emit
            every top-level state as an independent root
        states_module_name: Module that holds the generated state types
        naming_scheme: How state type names are derived
        list_naming: Whether List states contribute to derived names
        additional_derives: Extra derives merged with REQUIRED_DERIVES
        format_output: Run the external formatter over the output
        formatter_command: Formatter command, fed source on stdin
        formatter_timeout: Seconds to wait for the formatter
    """

    plugin_name: str = "GeneratedStatesPlugin"
    root_state_name: str | None = "GameState"
    states_module_name: str = "states"
    naming_scheme: NamingScheme = NamingScheme.FULL
    list_naming: ListNaming = ListNaming.INCLUSIVE
    additional_derives: list[str] = Field(default_factory=list)
    format_output: bool = False
    formatter_command: list[str] = Field(default_factory=lambda: list(DEFAULT_FORMATTER_COMMAND))
    formatter_timeout: float = 10.0

    model_config = ConfigDict(frozen=True)

    @field_validator("plugin_name", "states_module_name")
    @classmethod
    def validate_rust_identifier(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"{v!r} is not a valid identifier")
        return v

    @field_validator("root_state_name", mode="before")
    @classmethod
    def validate_root_state_name(cls, v: Any) -> Any:
        if v is False or v == "None":
            return None
        if isinstance(v, str) and not is_identifier(v):
            raise ValueError(f"Root state name {v!r} must start with an uppercase letter")
        return v

    @field_validator("naming_scheme", mode="before")
    @classmethod
    def validate_naming_scheme(cls, v: Any) -> Any:
        if isinstance(v, str):
            return NamingScheme.parse(v)
        return v

    @field_validator("list_naming", mode="before")
    @classmethod
    def validate_list_naming(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("additional_derives")
    @classmethod
    def validate_derives(cls, v: list[str]) -> list[str]:
        derives = [d.strip() for d in v]
        if not all(derives):
            raise ValueError("Derive names must not be empty")
        return derives

    @property
    def plugin_style(self) -> PluginStyle:
        if self.plugin_name[:1].isupper():
            return PluginStyle.STRUCT
        return PluginStyle.FUNCTION

    @property
    def derives(self) -> list[str]:
        """Required derives followed by additional ones, without duplicates."""
        return list(dict.fromkeys([*REQUIRED_DERIVES, *self.additional_derives]))

    def with_overrides(self, **overrides: Any) -> PluginConfig:
        """
        Return a validated copy with the given fields replaced.

        Raises:
            ConfigError: If an override is invalid
        """
        try:
            return PluginConfig.model_validate({**self.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(toml_path: Path) -> PluginConfig:
    """
    Load plugin configuration from the [stategen] table of a TOML file.

    Args:
        toml_path: Path to the TOML file

    Returns:
        PluginConfig with parsed values or defaults if the file is missing

    Raises:
        ConfigError: If the file is malformed or holds invalid values
    """
    if not toml_path.exists():
        return PluginConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {toml_path}: {e}") from e

    section = data.get("stategen", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[stategen] in {toml_path} must be a table")

    try:
        return PluginConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {toml_path}: {e}") from e
