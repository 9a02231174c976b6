"""
Shell catalogue, host snapshot, and profile path resolution.

Every supported dialect lives in CATALOG with its static metadata.
Everything that looks at the host (which shells exist, which one is
running, where the home directory is) goes through a HostEnvironment
snapshot so it can be faked in tests.

Usage:
    from profilecore.shells import HostEnvironment, detect_current_shell
    env = HostEnvironment.current()
    dialect = detect_current_shell(env)
    path = resolve_profile_path(dialect, env)
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional

from .errors import HomeDirectoryError

logger = logging.getLogger("profilecore.shells")

WINDOWS = "Windows"
MACOS = "Darwin"
LINUX = "Linux"


class ShellDialect(str, Enum):
    """A supported shell flavour."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"
    WSL_BASH = "wsl-bash"


class SyntaxFamily(str, Enum):
    """Which shell grammar a dialect's snippets are written in."""

    POSIX = "posix"
    FISH = "fish"
    POWERSHELL = "powershell"


@dataclass(frozen=True)
class ShellSpec:
    """Static metadata for one dialect.

    Attributes:
        dialect: The dialect this entry describes.
        display_name: Human-readable name for prompts and tables.
        init_name: Argument passed to ``profilecore init``.
        family: Grammar used for generated snippets.
        reload_command: What the user runs to pick up profile changes.
        closers: Line endings that close a block in this grammar.
    """

    dialect: ShellDialect
    display_name: str
    init_name: str
    family: SyntaxFamily
    reload_command: str
    closers: tuple[str, ...]


CATALOG: dict[ShellDialect, ShellSpec] = {
    ShellDialect.BASH: ShellSpec(
        dialect=ShellDialect.BASH,
        display_name="Bash",
        init_name="bash",
        family=SyntaxFamily.POSIX,
        reload_command="source ~/.bashrc",
        closers=("fi", "}"),
    ),
    ShellDialect.ZSH: ShellSpec(
        dialect=ShellDialect.ZSH,
        display_name="Zsh",
        init_name="zsh",
        family=SyntaxFamily.POSIX,
        reload_command="source ~/.zshrc",
        closers=("fi", "}"),
    ),
    ShellDialect.FISH: ShellSpec(
        dialect=ShellDialect.FISH,
        display_name="Fish",
        init_name="fish",
        family=SyntaxFamily.FISH,
        reload_command="source ~/.config/fish/config.fish",
        closers=("end",),
    ),
    ShellDialect.POWERSHELL: ShellSpec(
        dialect=ShellDialect.POWERSHELL,
        display_name="PowerShell",
        init_name="powershell",
        family=SyntaxFamily.POWERSHELL,
        reload_command=". $PROFILE",
        closers=("}",),
    ),
    ShellDialect.WSL_BASH: ShellSpec(
        dialect=ShellDialect.WSL_BASH,
        display_name="Bash (WSL)",
        init_name="bash",
        family=SyntaxFamily.POSIX,
        reload_command="source ~/.bashrc (in WSL)",
        closers=("fi", "}"),
    ),
}

# Accepted spellings on the command line
_ALIASES = {
    "bash": ShellDialect.BASH,
    "zsh": ShellDialect.ZSH,
    "fish": ShellDialect.FISH,
    "powershell": ShellDialect.POWERSHELL,
    "pwsh": ShellDialect.POWERSHELL,
    "wsl-bash": ShellDialect.WSL_BASH,
}

SHELL_NAMES = list(_ALIASES)


def spec_for(dialect: ShellDialect) -> ShellSpec:
    """Return the catalogue entry for a dialect."""
    return CATALOG[dialect]


def parse_shell(name: str) -> ShellDialect:
    """Parse a shell name (case-insensitive, ``pwsh`` allowed).

    Raises:
        ValueError: If the name is not a supported shell.
    """
    try:
        return _ALIASES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported shell: {name!r} (expected one of {', '.join(SHELL_NAMES)})"
        ) from None


def ordered_shells(shells: Iterable[ShellDialect]) -> list[ShellDialect]:
    """Sort dialects into catalogue order for stable display."""
    wanted = set(shells)
    return [d for d in CATALOG if d in wanted]


# ---------------------------------------------------------------------------
# Host snapshot
# ---------------------------------------------------------------------------

def _safe_home() -> Optional[Path]:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


@dataclass
class HostEnvironment:
    """Snapshot of everything the engine reads from the host.

    Attributes:
        system: ``platform.system()`` value (Linux, Darwin, Windows).
        environ: Environment variables.
        home: User home directory, or None if it cannot be found.
        documents: Documents directory (used for the Windows PowerShell
            profile). Defaults to ``home / "Documents"``.
        which: Executable lookup, ``shutil.which`` compatible.
    """

    system: str
    environ: Mapping[str, str] = field(default_factory=dict)
    home: Optional[Path] = None
    documents: Optional[Path] = None
    which: Callable[[str], Optional[str]] = shutil.which

    def __post_init__(self) -> None:
        if self.documents is None and self.home is not None:
            self.documents = self.home / "Documents"

    @classmethod
    def current(cls) -> "HostEnvironment":
        """Capture the running host."""
        return cls(
            system=platform.system(),
            environ=dict(os.environ),
            home=_safe_home(),
            which=shutil.which,
        )

    @property
    def is_windows(self) -> bool:
        return self.system == WINDOWS

    @property
    def is_macos(self) -> bool:
        return self.system == MACOS

    def has_executable(self, name: str) -> bool:
        """Whether ``name`` resolves on the executable search path."""
        return self.which(name) is not None

    def require_home(self) -> Path:
        """Return the home directory or raise HomeDirectoryError."""
        if self.home is None:
            raise HomeDirectoryError("Could not determine your home directory")
        return self.home


# ---------------------------------------------------------------------------
# Profile locations
# ---------------------------------------------------------------------------

def resolve_profile_path(dialect: ShellDialect, env: HostEnvironment) -> Path:
    """Map a dialect to its profile file on this host.

    Pure: never touches the filesystem.

    Args:
        dialect: Shell dialect.
        env: Host snapshot.

    Returns:
        Path to the profile file (which may not exist yet).

    Raises:
        HomeDirectoryError: If the home or documents directory is unknown.
    """
    home = env.require_home()

    if dialect == ShellDialect.BASH:
        return home / (".bash_profile" if env.is_macos else ".bashrc")
    if dialect == ShellDialect.ZSH:
        return home / ".zshrc"
    if dialect == ShellDialect.FISH:
        return home / ".config" / "fish" / "config.fish"
    if dialect == ShellDialect.POWERSHELL:
        if env.is_windows:
            if env.documents is None:
                raise HomeDirectoryError("Could not determine your Documents directory")
            return env.documents / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
        return home / ".config" / "powershell" / "profile.ps1"
    if dialect == ShellDialect.WSL_BASH:
        # WSL is a Linux userland
        return home / ".bashrc"
    raise ValueError(f"Unsupported shell: {dialect!r}")


def reload_command(dialect: ShellDialect) -> str:
    """Command the user runs to reload their profile."""
    return CATALOG[dialect].reload_command


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

def get_available_shells(env: HostEnvironment) -> set[ShellDialect]:
    """Probe the host for installed shells.

    Args:
        env: Host snapshot.

    Returns:
        Set of dialects present on this machine (possibly empty).
    """
    available: set[ShellDialect] = set()

    if env.is_windows:
        if (
            "PSModulePath" in env.environ
            or env.has_executable("pwsh")
            or env.has_executable("powershell")
        ):
            available.add(ShellDialect.POWERSHELL)
        if env.has_executable("bash"):
            available.add(ShellDialect.BASH)
        if env.has_executable("wsl"):
            available.add(ShellDialect.WSL_BASH)
    else:
        for dialect in (ShellDialect.BASH, ShellDialect.ZSH, ShellDialect.FISH):
            if env.has_executable(dialect.value):
                available.add(dialect)
        if env.has_executable("pwsh"):
            available.add(ShellDialect.POWERSHELL)

    logger.debug("Available shells: %s", [d.value for d in ordered_shells(available)])
    return available


def default_shell(env: HostEnvironment) -> ShellDialect:
    """OS fallback when the running shell cannot be inferred."""
    if env.is_windows:
        return ShellDialect.POWERSHELL
    if env.is_macos:
        return ShellDialect.ZSH
    return ShellDialect.BASH


def detect_current_shell(env: HostEnvironment) -> ShellDialect:
    """Best-effort guess at the user's interactive shell.

    Looks at ``$SHELL`` first, then the PowerShell module path on
    Windows, then falls back to the OS default.
    """
    shell_path = env.environ.get("SHELL", "")
    if shell_path:
        name = shell_path.replace("\\", "/").rsplit("/", 1)[-1].lower()
        for token, dialect in (
            ("bash", ShellDialect.BASH),
            ("zsh", ShellDialect.ZSH),
            ("fish", ShellDialect.FISH),
            ("pwsh", ShellDialect.POWERSHELL),
        ):
            if token in name:
                return dialect
        logger.debug("Unrecognised $SHELL %r, using OS default", shell_path)

    if env.is_windows and "PSModulePath" in env.environ:
        return ShellDialect.POWERSHELL

    return default_shell(env)
