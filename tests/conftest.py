"""Shared pytest fixtures for stategen tests."""

from pathlib import Path

import pytest

from stategen.core.config import PluginConfig

NESTED_STATES = """\
Loading [
    Config
    Assets
]
Ready {
    Menu
    Game {
        Playing [
            Player { Alive Dead }
            Environment { Normal Danger }
        ]
        Paused
        Over
    }
}
"""


@pytest.fixture
def nested_source() -> str:
    """Return a DSL text mixing enums, lists and singletons."""
    return NESTED_STATES


@pytest.fixture
def states_file(tmp_path: Path) -> Path:
    """Write the nested DSL text to a temporary file."""
    path = tmp_path / "states.txt"
    path.write_text(NESTED_STATES)
    return path


@pytest.fixture
def default_config() -> PluginConfig:
    """Return the default plugin configuration."""
    return PluginConfig()


@pytest.fixture
def rootless_config() -> PluginConfig:
    """Return a configuration without a synthetic root state."""
    return PluginConfig(root_state_name=None)
