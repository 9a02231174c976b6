"""
Preflight checks: is the profilecore binary reachable?

The installed hook only fires when ``profilecore`` resolves on PATH at
shell start-up. Before writing any profile the installer checks that,
and when it doesn't resolve, looks in the usual places:

  - the directory of the running executable
  - /usr/local/bin, /usr/bin, ~/.local/bin, ~/bin          (POSIX)
  - C:\\Program Files\\ProfileCore, ~/.local/bin, ~/bin      (Windows)

A binary found off-PATH can be wired in with a PATH snippet appended
to the current shell's profile, with the same backup-then-append
discipline as the hook itself.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from . import BINARY_NAME
from .backup import backup_profile
from .profile_block import append_to_profile, generate_path_block, read_profile
from .shells import HostEnvironment, ShellDialect, resolve_profile_path

logger = logging.getLogger("profilecore.preflight")


class BinaryStatus(str, Enum):
    """Where the profilecore binary was found."""

    ON_PATH = "on-path"
    OFF_PATH = "off-path"
    MISSING = "missing"


@dataclass
class BinaryCheck:
    """Result of looking for the profilecore binary."""

    status: BinaryStatus
    path: Optional[Path] = None
    directory: Optional[Path] = None

    @property
    def on_path(self) -> bool:
        return self.status == BinaryStatus.ON_PATH

    @property
    def found(self) -> bool:
        return self.status != BinaryStatus.MISSING


@dataclass
class PathConfigResult:
    """Outcome of appending the PATH snippet to a profile."""

    profile_path: Path
    already_configured: bool = False
    backup_path: Optional[Path] = None


def binary_filename(env: HostEnvironment) -> str:
    """Executable file name on this platform."""
    return f"{BINARY_NAME}.exe" if env.is_windows else BINARY_NAME


def is_binary_on_path(env: HostEnvironment) -> bool:
    """Whether ``profilecore`` resolves on the search path."""
    return env.has_executable(BINARY_NAME)


def candidate_dirs(env: HostEnvironment, executable: Optional[str] = None) -> list[Path]:
    """Directories to search when the binary is not on PATH, in order.

    Args:
        env: Host snapshot.
        executable: Path of the running program (defaults to sys.argv[0]).
    """
    dirs: list[Path] = []

    running = executable if executable is not None else (sys.argv[0] if sys.argv else "")
    if running:
        dirs.append(Path(running).expanduser().resolve().parent)

    if env.is_windows:
        dirs.append(Path(r"C:\Program Files\ProfileCore"))
        dirs.append(Path(r"C:\Program Files (x86)\ProfileCore"))
    else:
        dirs.append(Path("/usr/local/bin"))
        dirs.append(Path("/usr/bin"))

    if env.home is not None:
        dirs.append(env.home / ".local" / "bin")
        dirs.append(env.home / "bin")

    return dirs


def find_binary_location(
    env: HostEnvironment,
    executable: Optional[str] = None,
) -> Optional[Path]:
    """Search the fallback directories for the binary.

    Returns:
        The directory containing the binary, or None.
    """
    name = binary_filename(env)
    for directory in candidate_dirs(env, executable):
        if (directory / name).is_file():
            logger.debug("Found %s in %s", name, directory)
            return directory
    return None


def check_binary(env: HostEnvironment, executable: Optional[str] = None) -> BinaryCheck:
    """Locate the profilecore binary.

    Args:
        env: Host snapshot.
        executable: Path of the running program, for the first fallback.

    Returns:
        BinaryCheck describing where (if anywhere) it was found.
    """
    resolved = env.which(BINARY_NAME)
    if resolved:
        path = Path(resolved)
        return BinaryCheck(status=BinaryStatus.ON_PATH, path=path, directory=path.parent)

    directory = find_binary_location(env, executable)
    if directory is not None:
        return BinaryCheck(
            status=BinaryStatus.OFF_PATH,
            path=directory / binary_filename(env),
            directory=directory,
        )
    return BinaryCheck(status=BinaryStatus.MISSING)


def configure_path(
    dialect: ShellDialect,
    bin_dir: Path,
    env: HostEnvironment,
) -> PathConfigResult:
    """Append a PATH snippet for ``bin_dir`` to the dialect's profile.

    Skips the write when the directory already appears in the profile.

    Raises:
        BackupError: If the profile could not be backed up.
        ProfileWriteError: If the profile could not be read or written.
    """
    profile_path = resolve_profile_path(dialect, env)
    content = read_profile(profile_path)

    if str(bin_dir) in content:
        logger.info("%s already on PATH in %s", bin_dir, profile_path)
        return PathConfigResult(profile_path=profile_path, already_configured=True)

    backup = backup_profile(profile_path)
    append_to_profile(profile_path, generate_path_block(dialect, bin_dir))
    return PathConfigResult(profile_path=profile_path, backup_path=backup)


def manual_path_instructions(bin_dir: Path, env: HostEnvironment) -> list[tuple[str, str]]:
    """Per-shell (label, command) pairs for adding ``bin_dir`` by hand."""
    if env.is_windows:
        return [
            (
                "PowerShell (run once)",
                f"[Environment]::SetEnvironmentVariable('Path', $env:Path + ';{bin_dir}', 'User')",
            ),
            ("System Settings", f"Environment Variables > Path > New > {bin_dir}"),
        ]
    return [
        ("Bash (~/.bashrc or ~/.bash_profile)", f'export PATH="{bin_dir}:$PATH"'),
        ("Zsh (~/.zshrc)", f'export PATH="{bin_dir}:$PATH"'),
        ("Fish (~/.config/fish/config.fish)", f"set -gx PATH {bin_dir} $PATH"),
    ]
