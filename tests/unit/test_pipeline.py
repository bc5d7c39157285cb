"""Tests for the compile pipeline."""

import pytest

from stategen._version import get_version
from stategen.core.config import PluginConfig
from stategen.core.errors import DuplicateNameError, ParseError
from stategen.core.naming import NamingScheme
from stategen.core.nodes import EnumNode, ListNode, SingletonNode
from stategen.core.parser import parse_config
from stategen.core.pipeline import (
    IMPLICIT_ROOT_NAME,
    build_root,
    compile_states,
    generate_debug_info,
    process_parse_nodes,
)


class TestBuildRoot:
    def test_named_root_without_items(self) -> None:
        assert build_root([], "GameState") == SingletonNode(name="GameState")

    def test_named_root_with_items(self) -> None:
        items = [SingletonNode(name="A")]
        assert build_root(items, "GameState") == EnumNode(name="GameState", children=items)

    def test_implicit_root(self) -> None:
        items = [SingletonNode(name="A")]
        assert build_root(items, None) == ListNode(name=IMPLICIT_ROOT_NAME, children=items)


class TestProcessParseNodes:
    def test_with_root(self, nested_source: str) -> None:
        records = process_parse_nodes(parse_config(nested_source), NamingScheme.FULL, "GameState")
        assert records[0].name == "GameState"
        assert records[0].variants == ["Loading", "Ready"]
        names = {r.resolved_name for r in records}
        assert "GameStateReadyGamePlayingPlayerAlive" in names
        assert len(names) == len(records) == 16

    def test_without_root(self, nested_source: str) -> None:
        records = process_parse_nodes(parse_config(nested_source), NamingScheme.SHORT, None)
        assert [r.resolved_name for r in records[:2]] == ["Loading", "Ready"]
        assert all(r.parent is None for r in records[:2])
        assert len(records) == 15

    def test_empty_input_with_root(self) -> None:
        records = process_parse_nodes([], NamingScheme.FULL, "GameState")
        assert [(r.name, r.resolved_name) for r in records] == [("GameState", "GameState")]

    def test_empty_input_without_root(self) -> None:
        assert process_parse_nodes([], NamingScheme.FULL, None) == []

    def test_comments_only(self) -> None:
        items = parse_config("// nothing here")
        assert process_parse_nodes(items, NamingScheme.FULL, None) == []


class TestDebugInfo:
    def test_banner(self) -> None:
        banner = generate_debug_info("states.txt", "A {\n  B\n\n}")
        assert banner == (
            f"// generated by stategen v{get_version()}\n"
            "// src: states.txt\n"
            "// A {\n"
            "//   B\n"
            "//\n"
            "// }\n"
        )


class TestCompileStates:
    def test_default_config(self) -> None:
        output = compile_states("Menu { Main }")
        assert "pub enum GameState {\n        #[default]\n        Menu,\n    }" in output
        assert "#[source(GameStateMenu = GameStateMenu::Main)]" in output
        assert output.startswith("use bevy::prelude::AppExtStates;")

    def test_rootless(self, rootless_config: PluginConfig) -> None:
        output = compile_states("Menu { Main }", rootless_config)
        assert "GameState" not in output
        assert "app.init_state::<states::Menu>()" in output

    def test_empty_root(self) -> None:
        output = compile_states("")
        assert "pub struct GameState;" in output

    def test_banner_prepended(self) -> None:
        output = compile_states("A", PluginConfig(root_state_name=None), src_path="a.txt")
        banner, _, rest = output.partition("\n\n")
        assert banner.endswith("// src: a.txt\n// A")
        assert rest.startswith("use bevy::prelude::AppExtStates;")

    def test_format_disabled_does_not_run_formatter(self) -> None:
        config = PluginConfig(formatter_command=["definitely-not-a-formatter"])
        assert compile_states("A", config) == compile_states("A")

    def test_format_enabled_passthrough(self) -> None:
        config = PluginConfig(format_output=True, formatter_command=["cat"])
        assert compile_states("A", config) == compile_states("A")

    def test_parse_error(self) -> None:
        with pytest.raises(ParseError):
            compile_states("A {")

    def test_duplicate_name(self) -> None:
        config = PluginConfig(naming_scheme=NamingScheme.NONE, root_state_name=None)
        with pytest.raises(DuplicateNameError):
            compile_states("X { A } Y { A }", config)

    def test_deep_nesting(self) -> None:
        depth = 600
        output = compile_states("A{" * depth + "}" * depth, PluginConfig(root_state_name=None))
        assert f"pub struct {'A' * depth};" in output
        assert output.count(".add_sub_state::<states::") == depth - 1
        assert output.count("#[derive(") == depth
