"""Shared test fixtures for profilecore."""

from __future__ import annotations

from pathlib import Path

import pytest

from profilecore import CONFIG_DIR_ENV
from profilecore.shells import HostEnvironment


def _which_for(names):
    table = {name: f"/usr/bin/{name}" for name in names}
    return table.get


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Where the config directory goes (not created)."""
    return tmp_path / "config"


@pytest.fixture
def make_env(home: Path, config_path: Path):
    """Factory for host snapshots rooted in tmp_path.

    ``shells`` lists executables that resolve; ``binary`` adds
    profilecore itself. Extra keyword arguments become environment
    variables.
    """

    def _make(system="Linux", shells=("bash", "zsh"), binary=True, **environ):
        names = list(shells) + (["profilecore"] if binary else [])
        variables = {"SHELL": "/bin/bash", CONFIG_DIR_ENV: str(config_path)}
        variables.update(environ)
        return HostEnvironment(
            system=system,
            environ=variables,
            home=home,
            which=_which_for(names),
        )

    return _make


@pytest.fixture
def env(make_env) -> HostEnvironment:
    """Linux host with bash and zsh installed and profilecore on PATH."""
    return make_env()
