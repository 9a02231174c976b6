"""
Profile block codec: generate, locate and strip the profilecore hook.

An installed block looks like this (bash):

    <blank separator line>
    # profilecore:shell-hook v1.0.0 (added by installer)
    if command -v profilecore >/dev/null 2>&1; then
        eval "$(profilecore init bash)"
    fi
    # profilecore:shell-hook:end

Removal prefers the end marker. Blocks without one (older releases,
hand edits) are consumed with a line-shape heuristic: blank lines,
``if``/``eval`` openers, indented lines and lines ending in a block
closer are swallowed until the first line that looks like anything
else. Older releases started their block with
``# ProfileCore v1.0.0 - Added by installer``; that line is recognised
too.

Profiles are read and written without newline translation, so lines
outside the block keep their original endings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import BINARY_NAME, __version__
from .errors import ProfileWriteError
from .shells import CATALOG, ShellDialect, SyntaxFamily, spec_for

logger = logging.getLogger("profilecore.profile_block")

MARKER = "profilecore:shell-hook"
END_MARKER_LINE = f"# {MARKER}:end"
PATH_MARKER = "profilecore:path"

# Start line written by releases before the end marker existed
LEGACY_MARKER_RE = re.compile(r"ProfileCore v(?P<legacy>\S+) - Added by installer")

_START_RE = re.compile(
    re.escape(MARKER) + r"(?!:end)(?:\s+v(?P<version>\S+))?"
    + "|" + LEGACY_MARKER_RE.pattern
)
_OPENER_RE = re.compile(r"^(if|eval)\b", re.IGNORECASE)

# Union of every dialect's closers; removal doesn't know which shell wrote the block
BLOCK_CLOSERS: tuple[str, ...] = tuple(
    sorted({closer for spec in CATALOG.values() for closer in spec.closers})
)


@dataclass(frozen=True)
class ProfileBlock:
    """A located hook block inside a profile's text.

    Attributes:
        start: Index of the first line (inclusive).
        end: Index one past the last line.
        text: The raw text of the block.
        version: Version token from the marker line, if any.
        terminated: True when an explicit end marker closed the block.
    """

    start: int
    end: int
    text: str
    version: Optional[str] = None
    terminated: bool = False


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def start_marker_line(version: str = __version__) -> str:
    """The first line of every generated block."""
    return f"# {MARKER} v{version} (added by installer)"


def generate_block(dialect: ShellDialect, version: str = __version__) -> str:
    """Build the hook block for a dialect.

    The block starts with a blank line so it never runs into a
    profile that lacks a trailing newline.

    Args:
        dialect: Target shell dialect.
        version: Version token embedded in the marker line.

    Returns:
        Block text, newline-terminated.
    """
    spec = spec_for(dialect)
    init = f"{BINARY_NAME} init {spec.init_name}"

    if spec.family == SyntaxFamily.POSIX:
        body = (
            f"if command -v {BINARY_NAME} >/dev/null 2>&1; then\n"
            f"    eval \"$({init})\"\n"
            "fi\n"
        )
    elif spec.family == SyntaxFamily.FISH:
        body = (
            f"if command -v {BINARY_NAME} > /dev/null\n"
            f"    {init} | source\n"
            "end\n"
        )
    else:
        body = (
            f"if (Get-Command {BINARY_NAME} -ErrorAction SilentlyContinue) {{\n"
            f"    {init} | Out-String | Invoke-Expression\n"
            "}\n"
        )

    return f"\n{start_marker_line(version)}\n{body}{END_MARKER_LINE}\n"


def generate_path_block(dialect: ShellDialect, bin_dir: Path) -> str:
    """Build the PATH-extension snippet for a dialect.

    Args:
        dialect: Target shell dialect.
        bin_dir: Directory containing the profilecore binary.

    Returns:
        Snippet text, with a leading blank separator line.
    """
    family = spec_for(dialect).family
    if family == SyntaxFamily.POSIX:
        line = f'export PATH="{bin_dir}:$PATH"'
    elif family == SyntaxFamily.FISH:
        line = f"set -gx PATH {bin_dir} $PATH"
    else:
        line = f'$env:PATH = "{bin_dir};" + $env:PATH'
    return f"\n# {PATH_MARKER} (added by installer)\n{line}\n"


# ---------------------------------------------------------------------------
# Probe
# ---------------------------------------------------------------------------

def content_has_marker(content: str) -> bool:
    """Whether profile text contains the hook marker (current or legacy)."""
    return MARKER in content or LEGACY_MARKER_RE.search(content) is not None


def is_installed(profile_path: Path) -> bool:
    """Check whether the hook is already present in a profile.

    A plain substring search, not a parse: a copy of the marker in
    unrelated text counts as installed.

    Args:
        profile_path: Profile file to inspect.

    Returns:
        True if the marker was found. False if the file is missing or
        unreadable.
    """
    if not profile_path.is_file():
        return False
    try:
        content = profile_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Could not read %s: %s", profile_path, exc)
        return False
    return content_has_marker(content)


# ---------------------------------------------------------------------------
# Location + removal
# ---------------------------------------------------------------------------

def _is_end_marker(line: str) -> bool:
    return line.strip() == END_MARKER_LINE


def _start_version(line: str) -> Optional[re.Match]:
    if _is_end_marker(line):
        return None
    return _START_RE.search(line)


def _looks_like_block_line(line: str) -> bool:
    """Skip-mode test: does this line still look like part of the hook?"""
    text = line.rstrip("\r\n")
    stripped = text.strip()
    if not stripped:
        return True
    if _OPENER_RE.match(text):
        return True
    if text[:1].isspace():
        return True
    if stripped.endswith("}"):
        return True
    last_token = stripped.split()[-1]
    return last_token in BLOCK_CLOSERS


def _is_blank(line: str) -> bool:
    return not line.strip()


def find_blocks(content: str) -> list[ProfileBlock]:
    """Locate every hook block in profile text.

    Args:
        content: Full profile text.

    Returns:
        Blocks in file order. Empty when no marker line is present.
    """
    lines = content.splitlines(keepends=True)
    blocks: list[ProfileBlock] = []
    i = 0
    previous_end = 0

    while i < len(lines):
        match = _start_version(lines[i])
        if match is None:
            i += 1
            continue

        start = i
        # The generator's blank separator belongs to the block
        if start > previous_end and _is_blank(lines[start - 1]):
            start -= 1

        # An end marker only counts if every line before it is hook-shaped;
        # otherwise it is an orphan and user lines sit in between
        end: Optional[int] = None
        for j in range(i + 1, len(lines)):
            if _is_end_marker(lines[j]):
                end = j + 1
                break
            if _start_version(lines[j]) is not None or not _looks_like_block_line(lines[j]):
                break

        terminated = end is not None
        if end is None:
            end = i + 1
            while end < len(lines) and _looks_like_block_line(lines[end]):
                end += 1

        blocks.append(
            ProfileBlock(
                start=start,
                end=end,
                text="".join(lines[start:end]),
                version=match.group("version") or match.group("legacy"),
                terminated=terminated,
            )
        )
        previous_end = end
        i = end

    return blocks


def strip_block(content: str) -> str:
    """Remove every hook block from profile text.

    Content without a marker line comes back unchanged.

    Args:
        content: Full profile text.

    Returns:
        Text with the blocks removed.
    """
    blocks = find_blocks(content)
    if not blocks:
        return content

    lines = content.splitlines(keepends=True)
    kept: list[str] = []
    cursor = 0
    for block in blocks:
        kept.extend(lines[cursor:block.start])
        cursor = block.end
    kept.extend(lines[cursor:])

    logger.debug("Stripped %d block(s)", len(blocks))
    return "".join(kept)


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------

def read_profile(profile_path: Path) -> str:
    """Read a profile, returning '' when it does not exist.

    Line endings are kept as they are on disk.

    Raises:
        ProfileWriteError: If the file exists but cannot be read.
    """
    if not profile_path.exists():
        return ""
    try:
        with profile_path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ProfileWriteError(profile_path, _as_os_error(exc)) from exc


def append_to_profile(profile_path: Path, text: str) -> None:
    """Append text to a profile, creating it and its parents if needed.

    Raises:
        ProfileWriteError: If the directory or file cannot be written.
    """
    try:
        profile_path.parent.mkdir(parents=True, exist_ok=True)
        with profile_path.open("a", encoding="utf-8", newline="") as fh:
            fh.write(text)
    except OSError as exc:
        raise ProfileWriteError(profile_path, exc) from exc
    logger.info("Appended %d bytes to %s", len(text), profile_path)


def write_profile(profile_path: Path, text: str) -> None:
    """Replace a profile's content in place.

    Raises:
        ProfileWriteError: If the file cannot be written.
    """
    try:
        profile_path.parent.mkdir(parents=True, exist_ok=True)
        with profile_path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    except OSError as exc:
        raise ProfileWriteError(profile_path, exc) from exc
    logger.info("Rewrote %s", profile_path)


def _as_os_error(exc: Exception) -> OSError:
    if isinstance(exc, OSError):
        return exc
    return OSError(str(exc))
