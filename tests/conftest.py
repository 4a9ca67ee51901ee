"""Global test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from lando.config.config_loader import ConfigLoader

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the home directory at a temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr("pathlib.Path.home", lambda: home)
    return home


@pytest.fixture
def env() -> dict[str, str]:
    """An isolated environment mapping."""
    return {
        "PATH": "/usr/bin:/bin",
        "HOME": "/home/tester",
        "LANDO_LOG_LEVEL": "info",
        "MY_LANDO_THING": "substring",
        "EDITOR": "vim",
    }


@pytest.fixture(autouse=True)
def reset_config_singleton() -> Generator[None, None, None]:
    """Make sure ConfigLoader.get_instance never leaks between tests."""
    ConfigLoader._instance = None
    yield
    ConfigLoader._instance = None
