"""Tests for file generation and template updates."""

from pathlib import Path

import pytest

from stategen.build import generate_plugin, update_template
from stategen.core.config import PluginConfig
from stategen.core.errors import DuplicateNameError, ParseError
from stategen.core.pipeline import compile_states


class TestGeneratePlugin:
    def test_writes_output(self, states_file: Path, nested_source: str) -> None:
        dst = states_file.with_suffix(".rs")
        assert generate_plugin(states_file, dst) == dst
        output = dst.read_text()
        assert output.startswith("// generated by stategen v")
        assert f"// src: {states_file}\n" in output
        assert "// Loading [\n" in output
        assert output.endswith(compile_states(nested_source))

    def test_creates_parent_directories(self, states_file: Path, tmp_path: Path) -> None:
        dst = tmp_path / "out" / "nested" / "states.rs"
        generate_plugin(states_file, dst, PluginConfig(root_state_name=None))
        assert dst.exists()
        assert "GameState" not in dst.read_text().split("\n\n", 1)[1]

    def test_parse_error_leaves_no_file(self, tmp_path: Path) -> None:
        src = tmp_path / "broken.txt"
        src.write_text("Root {\n  A\n")
        dst = tmp_path / "broken.rs"
        with pytest.raises(ParseError) as exc_info:
            generate_plugin(src, dst)
        assert not dst.exists()
        assert str(src) in str(exc_info.value)

    def test_duplicate_leaves_existing_file(self, tmp_path: Path) -> None:
        src = tmp_path / "dup.txt"
        src.write_text("A A")
        dst = tmp_path / "dup.rs"
        dst.write_text("previous")
        with pytest.raises(DuplicateNameError):
            generate_plugin(src, dst)
        assert dst.read_text() == "previous"


class TestUpdateTemplate:
    def test_regenerates_below_header(self, tmp_path: Path) -> None:
        path = tmp_path / "states.rs"
        path.write_text(
            "// stategen:root_state None\n"
            "// stategen:plugin_name add_states\n"
            "// Menu { Main }\n"
            "stale generated code\n"
        )
        update_template(path)
        text = path.read_text()
        header, _, body = text.partition("\n\n")
        assert header == (
            "// stategen:root_state None\n// stategen:plugin_name add_states\n// Menu { Main }"
        )
        assert "stale" not in text
        assert body == compile_states(
            "Menu { Main }", PluginConfig(root_state_name=None, plugin_name="add_states")
        )

    def test_idempotent(self, tmp_path: Path) -> None:
        path = tmp_path / "states.rs"
        path.write_text("// Menu { Main Settings }\n")
        update_template(path)
        first = path.read_text()
        update_template(path)
        assert path.read_text() == first

    def test_base_config_used(self, tmp_path: Path) -> None:
        path = tmp_path / "states.rs"
        path.write_text("// A\n")
        update_template(path, PluginConfig(states_module_name="game_states"))
        assert "pub mod game_states {" in path.read_text()
