"""Exceptions raised by the shell integration engine."""

from __future__ import annotations

from pathlib import Path


class ProfileCoreError(Exception):
    """Base class for profilecore errors."""


class HomeDirectoryError(ProfileCoreError):
    """Raised when the user's home (or documents) directory cannot be found.

    Nothing can be installed without knowing where profiles live, so
    callers treat this as fatal for the whole run.
    """


class BackupError(ProfileCoreError):
    """Raised when a profile could not be copied to its backup path."""

    def __init__(self, profile_path: Path, cause: OSError) -> None:
        self.profile_path = profile_path
        self.cause = cause
        super().__init__(f"Could not back up {profile_path}: {cause}")


class ProfileWriteError(ProfileCoreError):
    """Raised when a profile could not be read or written."""

    def __init__(self, profile_path: Path, cause: OSError) -> None:
        self.profile_path = profile_path
        self.cause = cause
        super().__init__(f"Could not update {profile_path}: {cause}")
