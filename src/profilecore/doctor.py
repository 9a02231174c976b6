"""
Installation health checks.

Run after an install (for every shell that succeeded) and on demand
via ``profilecore doctor``. Purely observational: nothing here writes
to disk.

Usage:
    profilecore doctor
    profilecore doctor --shell zsh --json
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import ConfigDirectory
from .preflight import is_binary_on_path
from .profile_block import find_blocks, is_installed
from .shells import HostEnvironment, ShellDialect, resolve_profile_path


@dataclass
class Check:
    """A single verification result.

    Attributes:
        name: Short check identifier.
        description: Human-readable description.
        passed: Whether the check passed.
        detail: Extra info (path, version, ...).
        fix: Suggested fix if the check failed.
    """

    name: str
    description: str
    passed: bool
    detail: str = ""
    fix: str = ""


@dataclass
class VerificationReport:
    """All checks for one shell.

    Attributes:
        shell: Dialect that was verified.
        profile_path: Profile that was inspected.
        checks: Check results, in run order.
        block_version: Version token of the installed block, if any.
    """

    shell: ShellDialect
    profile_path: Path
    checks: list[Check] = field(default_factory=list)
    block_version: Optional[str] = None

    @property
    def passed_count(self) -> int:
        """Number of checks that passed."""
        return sum(1 for c in self.checks if c.passed)

    @property
    def failed_count(self) -> int:
        """Number of checks that failed."""
        return sum(1 for c in self.checks if not c.passed)

    @property
    def all_passed(self) -> bool:
        """Whether every check passed."""
        return self.failed_count == 0

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dict."""
        return {
            "shell": self.shell.value,
            "profile": str(self.profile_path),
            "block_version": self.block_version,
            "passed": self.passed_count,
            "failed": self.failed_count,
            "all_passed": self.all_passed,
            "checks": [
                {
                    "name": c.name,
                    "description": c.description,
                    "passed": c.passed,
                    "detail": c.detail,
                    "fix": c.fix,
                }
                for c in self.checks
            ],
        }


def _installed_version(profile_path: Path) -> Optional[str]:
    try:
        content = profile_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    blocks = find_blocks(content)
    return blocks[-1].version if blocks else None


def verify_installation(
    shell: ShellDialect,
    env: HostEnvironment,
    config_dir: Optional[ConfigDirectory] = None,
) -> VerificationReport:
    """Run the post-install checks for one shell.

    Args:
        shell: Dialect to verify.
        env: Host snapshot.
        config_dir: Configuration directory (resolved from env if None).

    Returns:
        VerificationReport with four checks: binary, profile, hook, config.
    """
    profile_path = resolve_profile_path(shell, env)
    config_dir = config_dir or ConfigDirectory.for_host(env)
    report = VerificationReport(shell=shell, profile_path=profile_path)

    on_path = is_binary_on_path(env)
    report.checks.append(Check(
        name="binary",
        description="profilecore binary on PATH",
        passed=on_path,
        fix="" if on_path else "Add the profilecore install directory to PATH",
    ))

    exists = profile_path.is_file()
    report.checks.append(Check(
        name="profile",
        description="Profile file exists",
        passed=exists,
        detail=str(profile_path),
        fix="" if exists else f"profilecore install --shell {shell.value}",
    ))

    hooked = is_installed(profile_path)
    if hooked:
        report.block_version = _installed_version(profile_path)
    report.checks.append(Check(
        name="hook",
        description="Init block present in profile",
        passed=hooked,
        detail=f"v{report.block_version}" if report.block_version else "",
        fix="" if hooked else f"profilecore install --shell {shell.value}",
    ))

    has_config = config_dir.exists()
    report.checks.append(Check(
        name="config",
        description="Config directory exists",
        passed=has_config,
        detail=str(config_dir.path),
        fix="" if has_config else "profilecore install",
    ))

    return report
