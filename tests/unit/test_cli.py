"""Tests for the stategen command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from stategen.cli import app, build_config
from stategen.core.naming import ListNaming, NamingScheme

runner = CliRunner()


class TestBuildConfig:
    def test_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "stategen.toml"
        path.write_text('[stategen]\nadditional_derives = ["Copy"]\nnaming_scheme = "short"\n')
        config = build_config(
            path,
            naming_scheme="none",
            no_root=True,
            derives=["PartialOrd"],
            list_naming="transparent",
        )
        assert config.naming_scheme == NamingScheme.NONE
        assert config.root_state_name is None
        assert config.additional_derives == ["Copy", "PartialOrd"]
        assert config.list_naming == ListNaming.TRANSPARENT

    def test_file_values_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "stategen.toml"
        path.write_text('[stategen]\nnaming_scheme = "short"\n')
        assert build_config(path).naming_scheme == NamingScheme.SHORT


class TestGenerateCommand:
    def test_default_output(self, states_file: Path) -> None:
        result = runner.invoke(app, ["generate", str(states_file)])
        assert result.exit_code == 0, result.output
        dst = states_file.with_suffix(".rs")
        assert f"Generated {dst}" in result.output
        assert "pub struct GeneratedStatesPlugin;" in dst.read_text()

    def test_options(self, states_file: Path, tmp_path: Path) -> None:
        dst = tmp_path / "plugin.rs"
        result = runner.invoke(
            app,
            [
                "generate",
                str(states_file),
                "-o",
                str(dst),
                "--no-root",
                "--naming-scheme",
                "short",
                "--plugin-name",
                "add_states",
                "-d",
                "Copy",
            ],
        )
        assert result.exit_code == 0, result.output
        text = dst.read_text()
        assert "pub fn add_states(app: &mut bevy::app::App) {" in text
        assert "pub enum PlayerAlive" not in text
        assert "pub struct PlayerAlive;" in text
        assert "Eq, Copy)]" in text

    def test_duplicate_name(self, tmp_path: Path) -> None:
        src = tmp_path / "dup.txt"
        src.write_text("X { A } Y { A }")
        result = runner.invoke(app, ["generate", str(src), "--naming-scheme", "none"])
        assert result.exit_code == 1
        assert "Duplicate name" in result.output
        assert not src.with_suffix(".rs").exists()

    def test_invalid_option(self, states_file: Path) -> None:
        result = runner.invoke(app, ["generate", str(states_file), "--naming-scheme", "long"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_source(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["generate", str(tmp_path / "missing.txt")])
        assert result.exit_code == 1


class TestUpdateCommand:
    def test_update(self, tmp_path: Path) -> None:
        path = tmp_path / "states.rs"
        path.write_text("// stategen:root_state None\n// Menu { Main }\n")
        result = runner.invoke(app, ["update", str(path)])
        assert result.exit_code == 0, result.output
        assert "pub enum Menu {" in path.read_text()


class TestCheckCommand:
    def test_valid(self, states_file: Path) -> None:
        result = runner.invoke(app, ["check", str(states_file)])
        assert result.exit_code == 0
        assert "is valid" in result.output

    def test_invalid(self, tmp_path: Path) -> None:
        src = tmp_path / "bad.txt"
        src.write_text("Menu { main }")
        result = runner.invoke(app, ["check", str(src)])
        assert result.exit_code == 1
        assert "Parse error:" in result.output
        assert "uppercase" in result.output

    @pytest.mark.parametrize("command", ["check", "generate", "inspect", "update"])
    def test_undecodable_source(self, tmp_path: Path, command: str) -> None:
        src = tmp_path / "binary.txt"
        src.write_bytes(b"\xff\xfeMenu")
        result = runner.invoke(app, [command, str(src)])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)


class TestInspectCommand:
    def test_table(self, tmp_path: Path) -> None:
        src = tmp_path / "menu.txt"
        src.write_text("Menu { Main }")
        result = runner.invoke(app, ["inspect", str(src), "--naming-scheme", "short"])
        assert result.exit_code == 0, result.output
        assert "States (Short naming)" in result.output
        assert "MenuMain" in result.output


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "stategen version" in result.output
