"""Tests for the profilecore command line."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from profilecore import __version__
from profilecore.cli import main
from profilecore.config import ConfigDirectory
from profilecore.errors import HomeDirectoryError
from profilecore.install_wizard import InstallOutcome, ShellInstallResult
from profilecore.profile_block import generate_block
from profilecore.shells import ShellDialect
from profilecore.uninstall_wizard import UninstallResult


class TestMain:
    """Top-level group options."""

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("install", "uninstall", "init", "doctor"):
            assert command in result.output


class TestInitCommand:
    """profilecore init SHELL."""

    def test_prints_script(self) -> None:
        result = CliRunner().invoke(main, ["init", "bash"])
        assert result.exit_code == 0
        assert "_PROFILECORE_COMPLETE=bash_source" in result.output

    def test_pwsh_alias(self) -> None:
        result = CliRunner().invoke(main, ["init", "pwsh"])
        assert result.exit_code == 0
        assert "function pcdoctor" in result.output

    def test_unsupported_shell(self) -> None:
        result = CliRunner().invoke(main, ["init", "tcsh"])
        assert result.exit_code == 2


class TestInstallCommand:
    """profilecore install."""

    def test_passes_shells_and_yes(self) -> None:
        ok = [ShellInstallResult(ShellDialect.BASH, InstallOutcome.SUCCESS)]
        with patch("profilecore.install_wizard.run_install_wizard", return_value=ok) as wizard:
            result = CliRunner().invoke(main, ["install", "--shell", "bash", "--shell", "zsh", "--yes"])
        assert result.exit_code == 0
        wizard.assert_called_once_with(
            shells=[ShellDialect.BASH, ShellDialect.ZSH], assume_yes=True,
        )

    def test_no_shell_means_prompt(self) -> None:
        with patch("profilecore.install_wizard.run_install_wizard", return_value=[]) as wizard:
            result = CliRunner().invoke(main, ["install"])
        assert result.exit_code == 0
        wizard.assert_called_once_with(shells=None, assume_yes=False)

    def test_failed_shell_exits_nonzero(self) -> None:
        results = [
            ShellInstallResult(ShellDialect.BASH, InstallOutcome.FAILED, error="denied"),
            ShellInstallResult(ShellDialect.ZSH, InstallOutcome.SUCCESS),
        ]
        with patch("profilecore.install_wizard.run_install_wizard", return_value=results):
            result = CliRunner().invoke(main, ["install", "--yes"])
        assert result.exit_code == 1

    def test_skipped_is_not_a_failure(self) -> None:
        results = [ShellInstallResult(ShellDialect.ZSH, InstallOutcome.SKIPPED)]
        with patch("profilecore.install_wizard.run_install_wizard", return_value=results):
            result = CliRunner().invoke(main, ["install"])
        assert result.exit_code == 0

    def test_home_error_is_fatal(self) -> None:
        with patch("profilecore.install_wizard.run_install_wizard",
                   side_effect=HomeDirectoryError("Could not determine your home directory")):
            result = CliRunner().invoke(main, ["install", "--yes"])
        assert result.exit_code == 1
        assert "home directory" in result.output


class TestUninstallCommand:
    """profilecore uninstall."""

    def test_passes_options(self) -> None:
        done = UninstallResult(ShellDialect.FISH, Path("/h/config.fish"), block_removed=True)
        with patch("profilecore.uninstall_wizard.run_uninstall_wizard", return_value=done) as wizard:
            result = CliRunner().invoke(main, ["uninstall", "--shell", "fish", "--yes", "--purge"])
        assert result.exit_code == 0
        wizard.assert_called_once_with(shell=ShellDialect.FISH, assume_yes=True, purge=True)

    def test_error_exits_nonzero(self) -> None:
        failed = UninstallResult(ShellDialect.BASH, Path("/h/.bashrc"), error="read-only")
        with patch("profilecore.uninstall_wizard.run_uninstall_wizard", return_value=failed):
            result = CliRunner().invoke(main, ["uninstall", "--yes"])
        assert result.exit_code == 1

    def test_cancel_exits_zero(self) -> None:
        with patch("profilecore.uninstall_wizard.run_uninstall_wizard", return_value=None):
            result = CliRunner().invoke(main, ["uninstall"])
        assert result.exit_code == 0


class TestDoctorCommand:
    """profilecore doctor."""

    def test_json_for_missing_install(self, env) -> None:
        with patch("profilecore.shells.HostEnvironment.current", return_value=env):
            result = CliRunner().invoke(main, ["doctor", "--shell", "zsh", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["shell"] == "zsh"
        assert data["all_passed"] is False

    def test_healthy_install_exits_zero(self, env, home: Path) -> None:
        (home / ".bashrc").write_text(generate_block(ShellDialect.BASH))
        ConfigDirectory.for_host(env).ensure()
        with patch("profilecore.shells.HostEnvironment.current", return_value=env):
            result = CliRunner().invoke(main, ["doctor"])
        assert result.exit_code == 0
        assert "All 4 checks passed" in result.output
