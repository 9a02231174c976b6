"""Tests for the shell catalogue, host snapshot and profile paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from profilecore.errors import HomeDirectoryError
from profilecore.shells import (
    CATALOG,
    SHELL_NAMES,
    HostEnvironment,
    ShellDialect,
    detect_current_shell,
    get_available_shells,
    ordered_shells,
    parse_shell,
    reload_command,
    resolve_profile_path,
)


class TestCatalog:
    """The catalogue covers every dialect."""

    def test_every_dialect_has_an_entry(self) -> None:
        assert set(CATALOG) == set(ShellDialect)
        for dialect, spec in CATALOG.items():
            assert spec.dialect == dialect
            assert spec.reload_command
            assert spec.closers

    def test_wsl_reuses_bash_init(self) -> None:
        assert CATALOG[ShellDialect.WSL_BASH].init_name == "bash"

    def test_reload_commands(self) -> None:
        assert reload_command(ShellDialect.BASH) == "source ~/.bashrc"
        assert reload_command(ShellDialect.ZSH) == "source ~/.zshrc"
        assert reload_command(ShellDialect.POWERSHELL) == ". $PROFILE"

    def test_ordered_shells_follows_catalogue(self) -> None:
        shells = {ShellDialect.FISH, ShellDialect.BASH, ShellDialect.ZSH}
        assert ordered_shells(shells) == [ShellDialect.BASH, ShellDialect.ZSH, ShellDialect.FISH]


class TestParseShell:
    """Shell names from the command line."""

    @pytest.mark.parametrize("name,expected", [
        ("bash", ShellDialect.BASH),
        ("Zsh", ShellDialect.ZSH),
        ("pwsh", ShellDialect.POWERSHELL),
        ("powershell", ShellDialect.POWERSHELL),
        ("wsl-bash", ShellDialect.WSL_BASH),
    ])
    def test_known_names(self, name: str, expected: ShellDialect) -> None:
        assert parse_shell(name) == expected

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError, match="Unsupported shell"):
            parse_shell("tcsh")

    def test_shell_names_include_alias(self) -> None:
        assert "pwsh" in SHELL_NAMES


class TestResolveProfilePath:
    """Dialect to profile file mapping."""

    def test_linux_paths(self, home: Path) -> None:
        env = HostEnvironment(system="Linux", home=home)
        assert resolve_profile_path(ShellDialect.BASH, env) == home / ".bashrc"
        assert resolve_profile_path(ShellDialect.ZSH, env) == home / ".zshrc"
        assert resolve_profile_path(ShellDialect.FISH, env) == home / ".config" / "fish" / "config.fish"
        assert resolve_profile_path(ShellDialect.POWERSHELL, env) == (
            home / ".config" / "powershell" / "profile.ps1"
        )
        assert resolve_profile_path(ShellDialect.WSL_BASH, env) == home / ".bashrc"

    def test_macos_bash_uses_bash_profile(self, home: Path) -> None:
        env = HostEnvironment(system="Darwin", home=home)
        assert resolve_profile_path(ShellDialect.BASH, env) == home / ".bash_profile"

    def test_windows_powershell_uses_documents(self, home: Path) -> None:
        env = HostEnvironment(system="Windows", home=home)
        assert env.documents == home / "Documents"
        assert resolve_profile_path(ShellDialect.POWERSHELL, env) == (
            home / "Documents" / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
        )

    def test_explicit_documents_dir(self, home: Path, tmp_path: Path) -> None:
        docs = tmp_path / "OneDrive" / "Documents"
        env = HostEnvironment(system="Windows", home=home, documents=docs)
        assert resolve_profile_path(ShellDialect.POWERSHELL, env).parent == docs / "PowerShell"

    def test_missing_home_raises(self) -> None:
        env = HostEnvironment(system="Linux", home=None)
        with pytest.raises(HomeDirectoryError):
            resolve_profile_path(ShellDialect.BASH, env)

    def test_resolution_is_pure(self, home: Path) -> None:
        env = HostEnvironment(system="Linux", home=home)
        resolve_profile_path(ShellDialect.FISH, env)
        assert not (home / ".config").exists()


class TestAvailableShells:
    """Probing the host for installed shells."""

    def test_linux(self, make_env) -> None:
        env = make_env(shells=("bash", "fish", "pwsh"))
        assert get_available_shells(env) == {
            ShellDialect.BASH, ShellDialect.FISH, ShellDialect.POWERSHELL,
        }

    def test_windows(self, make_env) -> None:
        env = make_env(system="Windows", shells=("wsl",), PSModulePath="C:\\Modules")
        assert get_available_shells(env) == {ShellDialect.POWERSHELL, ShellDialect.WSL_BASH}

    def test_nothing_installed(self, make_env) -> None:
        assert get_available_shells(make_env(shells=())) == set()


class TestDetectCurrentShell:
    """Best-effort detection of the running shell."""

    @pytest.mark.parametrize("shell_path,expected", [
        ("/bin/bash", ShellDialect.BASH),
        ("/usr/bin/zsh", ShellDialect.ZSH),
        ("/opt/homebrew/bin/fish", ShellDialect.FISH),
        ("/usr/local/bin/pwsh", ShellDialect.POWERSHELL),
    ])
    def test_from_shell_variable(self, make_env, shell_path: str, expected: ShellDialect) -> None:
        assert detect_current_shell(make_env(SHELL=shell_path)) == expected

    def test_windows_powershell_module_path(self, make_env) -> None:
        env = make_env(system="Windows", SHELL="", PSModulePath="C:\\Modules")
        assert detect_current_shell(env) == ShellDialect.POWERSHELL

    def test_os_defaults(self, make_env) -> None:
        assert detect_current_shell(make_env(SHELL="")) == ShellDialect.BASH
        assert detect_current_shell(make_env(system="Darwin", SHELL="/bin/tcsh")) == ShellDialect.ZSH
        assert detect_current_shell(make_env(system="Windows", SHELL="")) == ShellDialect.POWERSHELL
