"""
stategen command line interface.

Commands for compiling state DSL files, refreshing templates, validating
DSL text and inspecting the resolved state table.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from stategen._version import get_version
from stategen.build import generate_plugin, update_template
from stategen.core.config import PluginConfig, load_config
from stategen.core.errors import ParseError, StategenError
from stategen.core.parser import parse_config
from stategen.core.pipeline import process_parse_nodes

console = Console()

app = typer.Typer(
    help="stategen - compile state hierarchy DSL files into state plugin source.",
    no_args_is_help=True,
)

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="TOML file with a [stategen] table")
NAMING_OPTION = typer.Option(
    None, "--naming-scheme", "-n", help="Naming scheme: full, short or none"
)
ROOT_OPTION = typer.Option(None, "--root-state", help="Name of the synthetic root state")
NO_ROOT_OPTION = typer.Option(False, "--no-root", help="Emit top-level states as independent roots")
PLUGIN_OPTION = typer.Option(None, "--plugin-name", help="Plugin struct or function name")
MODULE_OPTION = typer.Option(None, "--states-module", help="Module holding the state types")
DERIVE_OPTION = typer.Option(None, "--derive", "-d", help="Additional derive (repeatable)")
LIST_NAMING_OPTION = typer.Option(
    None, "--list-naming", help="List states in names: inclusive or transparent"
)
FORMAT_OPTION = typer.Option(None, "--format/--no-format", help="Run the external formatter")


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"stategen version {get_version()}")
        typer.echo(f"  Python:   {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform: {platform.system()} {platform.release()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """stategen CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_config(
    config_path: Path | None = None,
    naming_scheme: str | None = None,
    root_state: str | None = None,
    no_root: bool = False,
    plugin_name: str | None = None,
    states_module: str | None = None,
    derives: list[str] | None = None,
    list_naming: str | None = None,
    format_output: bool | None = None,
) -> PluginConfig:
    """Load the config file (if any) and apply command line overrides."""
    config = load_config(config_path) if config_path else PluginConfig()

    overrides: dict[str, object] = {}
    if naming_scheme is not None:
        overrides["naming_scheme"] = naming_scheme
    if no_root:
        overrides["root_state_name"] = None
    elif root_state is not None:
        overrides["root_state_name"] = root_state
    if plugin_name is not None:
        overrides["plugin_name"] = plugin_name
    if states_module is not None:
        overrides["states_module_name"] = states_module
    if derives:
        overrides["additional_derives"] = [*config.additional_derives, *derives]
    if list_naming is not None:
        overrides["list_naming"] = list_naming
    if format_output is not None:
        overrides["format_output"] = format_output

    return config.with_overrides(**overrides) if overrides else config


def _fail(e: StategenError) -> typer.Exit:
    label = "Parse error" if isinstance(e, ParseError) else "Error"
    typer.echo(f"{label}: {e}", err=True)
    return typer.Exit(code=1)


@app.command("generate")
def generate_command(
    src: Path = typer.Argument(..., help="DSL source file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file"),
    config_path: Path | None = CONFIG_OPTION,
    naming_scheme: str | None = NAMING_OPTION,
    root_state: str | None = ROOT_OPTION,
    no_root: bool = NO_ROOT_OPTION,
    plugin_name: str | None = PLUGIN_OPTION,
    states_module: str | None = MODULE_OPTION,
    derive: list[str] | None = DERIVE_OPTION,
    list_naming: str | None = LIST_NAMING_OPTION,
    format_output: bool | None = FORMAT_OPTION,
) -> None:
    """Compile a DSL file into plugin source (default output: SRC with .rs suffix)."""
    dst = output or src.with_suffix(".rs")
    try:
        config = build_config(
            config_path,
            naming_scheme=naming_scheme,
            root_state=root_state,
            no_root=no_root,
            plugin_name=plugin_name,
            states_module=states_module,
            derives=derive,
            list_naming=list_naming,
            format_output=format_output,
        )
        generate_plugin(src, dst, config)
    except StategenError as e:
        raise _fail(e)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Generated {dst}")


@app.command("update")
def update_command(
    template: Path = typer.Argument(..., help="Template file with a directive header"),
    config_path: Path | None = CONFIG_OPTION,
    format_output: bool | None = FORMAT_OPTION,
) -> None:
    """Regenerate a template file from the DSL in its leading comment block."""
    try:
        config = build_config(config_path, format_output=format_output)
        update_template(template, config)
    except StategenError as e:
        raise _fail(e)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Updated {template}")


@app.command("check")
def check_command(
    src: Path = typer.Argument(..., help="DSL source file"),
) -> None:
    """Check that a DSL file parses completely."""
    try:
        parse_config(src.read_text(encoding="utf-8"), src)
    except ParseError as e:
        raise _fail(e)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{src} is valid")


@app.command("inspect")
def inspect_command(
    src: Path = typer.Argument(..., help="DSL source file"),
    config_path: Path | None = CONFIG_OPTION,
    naming_scheme: str | None = NAMING_OPTION,
    root_state: str | None = ROOT_OPTION,
    no_root: bool = NO_ROOT_OPTION,
    list_naming: str | None = LIST_NAMING_OPTION,
) -> None:
    """Show the flattened state table with resolved names."""
    try:
        config = build_config(
            config_path,
            naming_scheme=naming_scheme,
            root_state=root_state,
            no_root=no_root,
            list_naming=list_naming,
        )
        items = parse_config(src.read_text(encoding="utf-8"), src)
        records = process_parse_nodes(
            items, config.naming_scheme, config.root_state_name, config.list_naming
        )
    except StategenError as e:
        raise _fail(e)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    table = Table(title=f"States ({config.naming_scheme.label} naming)")
    table.add_column("#", justify="right")
    table.add_column("Parent", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Kind")
    table.add_column("Name", style="cyan")
    table.add_column("Resolved", style="green")
    table.add_column("Variants")

    for record in records:
        table.add_row(
            str(record.index),
            "-" if record.parent is None else str(record.parent),
            str(record.depth),
            record.node_type.value,
            record.name,
            record.resolved_name or "",
            ", ".join(record.variants),
        )

    console.print(table)


def main() -> None:
    app()
